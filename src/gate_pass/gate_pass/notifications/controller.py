from __future__ import annotations

from flask import Flask, jsonify

from ..common.security import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        items = container.notification_service.list_for_user(user_id=current_user_id())
        return jsonify({"notifications": [n.to_dict() for n in items]})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        notification = container.notification_service.mark_read(
            notification_id=notification_id,
            user_id=current_user_id(),
        )
        return jsonify({"notification": notification.to_dict()})
