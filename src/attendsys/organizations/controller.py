from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, current_identity, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.identity_resolver)
    service = container.organization_service

    @app.route("/api/organizations", methods=["GET"], endpoint="organizations_list")
    @login_required
    def organizations_list():
        orgs = service.list_organizations(current_identity())
        return jsonify({"organizations": [o.to_dict() for o in orgs]})

    @app.route("/api/organizations/<int:organization_id>", methods=["GET"], endpoint="organizations_get")
    @login_required
    def organizations_get(organization_id: int):
        return jsonify({"organization": service.get_organization(current_identity(), organization_id)})

    @app.route("/api/organizations", methods=["POST"], endpoint="organizations_create")
    @login_required
    def organizations_create():
        org = service.create_organization(current_identity(), json_body())
        return jsonify({"organization": org.to_dict()}), 201

    @app.route("/api/organizations/<int:organization_id>", methods=["PATCH"], endpoint="organizations_update")
    @login_required
    def organizations_update(organization_id: int):
        org = service.update_organization(current_identity(), organization_id, json_body())
        return jsonify({"organization": org.to_dict()})

    @app.route("/api/organizations/<int:organization_id>", methods=["DELETE"], endpoint="organizations_delete")
    @login_required
    def organizations_delete(organization_id: int):
        service.delete_organization(current_identity(), organization_id)
        return jsonify({"message": "Organization deleted"})
