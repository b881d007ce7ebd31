from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, current_identity, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.identity_resolver)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        result = container.auth_service.login(body.get("email"), body.get("password"))
        return jsonify(result.to_dict())

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    @login_required
    def auth_register():
        profile = container.user_service.register(current_identity(), json_body())
        return (
            jsonify(
                {
                    "message": "User created successfully",
                    "userId": profile.id,
                    "email": profile.email,
                    "role": profile.role.value,
                }
            ),
            201,
        )

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        return jsonify({"user": container.user_service.describe(current_identity())})
