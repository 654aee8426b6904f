from __future__ import annotations

import logging

from flask import Flask, jsonify, request, send_from_directory

from ..common.api import json_body
from ..common.security import current_user_id, end_session, login_required, start_session
from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.login(data.get("username"), data.get("password"), data.get("role"))
        start_session(user)
        return jsonify({"user": user.to_public_dict()})

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_student():
        user = container.user_service.register(json_body())
        return jsonify({"user": user.to_public_dict()}), 201

    @app.route("/api/auth/user", methods=["GET"], endpoint="current_user")
    @login_required
    def current_user():
        try:
            user = container.auth_service.get_current_user(current_user_id())
        except AuthenticationError:
            # account removed since login
            end_session()
            raise
        return jsonify({"user": user.to_public_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        end_session()
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/users/profile-photo", methods=["POST"], endpoint="upload_profile_photo")
    @login_required
    def upload_profile_photo():
        user = container.user_service.update_profile_photo(
            user_id=current_user_id(),
            upload=request.files.get("profilePhoto"),
        )
        return jsonify({"user": user.to_public_dict()})

    @app.route("/uploads/profile-photos/<path:filename>", methods=["GET"], endpoint="profile_photo")
    @login_required
    def profile_photo(filename: str):
        return send_from_directory(container.photo_storage.root.resolve(), filename)
