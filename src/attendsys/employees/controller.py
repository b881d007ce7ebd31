from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, current_identity, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.identity_resolver)
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def employees_list():
        employees = service.list_employees(current_identity())
        return jsonify({"employees": [e.to_dict() for e in employees]})

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(employee_id: int):
        return jsonify({"employee": service.get_employee(current_identity(), employee_id)})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @login_required
    def employees_create():
        employee = service.create_employee(current_identity(), json_body())
        return jsonify({"employee": employee.to_dict()}), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PATCH"], endpoint="employees_update")
    @login_required
    def employees_update(employee_id: int):
        employee = service.update_employee(current_identity(), employee_id, json_body())
        return jsonify({"employee": employee.to_dict()})

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @login_required
    def employees_delete(employee_id: int):
        service.delete_employee(current_identity(), employee_id)
        return jsonify({"message": "Employee deleted"})

    @app.route("/api/employees/assign-manager", methods=["POST"], endpoint="employees_assign_manager")
    @login_required
    def employees_assign_manager():
        profile = container.user_service.assign_manager(current_identity(), json_body())
        return jsonify({"message": "Manager assigned successfully", "user": profile.to_dict()})
