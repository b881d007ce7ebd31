from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import (
    auth_required,
    body_date,
    body_timestamp,
    current_identity,
    json_body,
    query_date,
    query_int,
)
from ..common.validators import optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.identity_resolver)
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        rows = service.list_records(
            current_identity(),
            start=query_date("from"),
            end=query_date("to"),
            employee_id=query_int("employee_id"),
            organization_id=query_int("organization_id"),
        )
        return jsonify({"records": [r.to_dict() for r in rows]})

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def attendance_checkin():
        body = json_body()
        record = service.check_in(
            current_identity(),
            employee_id=optional_int(body.get("employee_id"), "employee_id"),
            timestamp=body_timestamp(body, "check_in"),
        )
        return jsonify({"record": record.to_dict()}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @login_required
    def attendance_checkout():
        body = json_body()
        record = service.check_out(
            current_identity(),
            employee_id=optional_int(body.get("employee_id"), "employee_id"),
            timestamp=body_timestamp(body, "check_out"),
        )
        return jsonify({"record": record.to_dict()})

    @app.route("/api/attendance/absent", methods=["POST"], endpoint="attendance_absent")
    @login_required
    def attendance_absent():
        body = json_body()
        record = service.mark_absent(
            current_identity(),
            employee_id=optional_int(body.get("employee_id"), "employee_id"),
            work_date=body_date(body, "date"),
        )
        return jsonify({"record": record.to_dict()}), 201

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary():
        summary = service.daily_summary(
            current_identity(),
            organization_id=query_int("organization_id"),
            work_date=query_date("date"),
        )
        return jsonify(summary.to_dict())

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="attendance_daily")
    @login_required
    def attendance_daily():
        roster = service.daily_roster(
            current_identity(),
            organization_id=query_int("organization_id"),
            work_date=query_date("date"),
        )
        return jsonify(roster.to_dict())
