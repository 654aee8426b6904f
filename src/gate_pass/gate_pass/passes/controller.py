from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.api import json_body
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.security import current_role, current_user_id, roles_required
from ..container import Container
from ..core.enums import PassStatus, Role
from ..core.exceptions import ValidationError
from .service import EXPORT_FIELDS


def _date_arg(name: str = "date") -> Optional[date]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD")


def _qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    passes = container.pass_service

    def _joined(status: PassStatus, on_date: Optional[date] = None):
        rows = passes.list_by_status(status=status, on_date=on_date)
        return jsonify({"passes": [r.to_dict() for r in rows]})

    @app.route("/api/passes", methods=["POST"], endpoint="create_pass")
    @roles_required(Role.STUDENT)
    def create_pass():
        gate_pass = passes.create_pass(
            current_role=current_role(),
            student_id=current_user_id(),
            payload=json_body(),
        )
        return jsonify({"pass": gate_pass.to_dict()}), 201

    @app.route("/api/passes", methods=["GET"], endpoint="my_passes")
    @roles_required(Role.STUDENT)
    def my_passes():
        items = passes.list_for_student(student_id=current_user_id())
        return jsonify({"passes": [p.to_dict() for p in items]})

    @app.route("/api/passes/pending", methods=["GET"], endpoint="pending_passes")
    @roles_required(Role.WARDEN)
    def pending_passes():
        return _joined(PassStatus.PENDING)

    @app.route("/api/passes/approved", methods=["GET"], endpoint="approved_passes")
    @roles_required(Role.WARDEN, Role.GUARD)
    def approved_passes():
        return _joined(PassStatus.APPROVED, _date_arg())

    @app.route("/api/passes/rejected", methods=["GET"], endpoint="rejected_passes")
    @roles_required(Role.WARDEN)
    def rejected_passes():
        return _joined(PassStatus.REJECTED)

    @app.route("/api/passes/review", methods=["POST"], endpoint="review_pass")
    @roles_required(Role.WARDEN)
    def review_pass():
        data = json_body()
        gate_pass = passes.review_pass(
            current_role=current_role(),
            warden_id=current_user_id(),
            pass_id=data.get("passId"),
            decision=data.get("status"),
            note=data.get("wardenNote"),
        )
        return jsonify({"pass": gate_pass.to_dict()})

    @app.route("/api/passes/approved/export", methods=["GET"], endpoint="export_approved_passes")
    @roles_required(Role.WARDEN, Role.GUARD)
    def export_approved_passes():
        on_date = _date_arg()
        rows = passes.export_rows(status=PassStatus.APPROVED, on_date=on_date)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        suffix = on_date.strftime("%Y%m%d") if on_date else "all"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=approved_passes_{suffix}.csv"},
        )

    @app.route("/api/passes/verify", methods=["GET"], endpoint="verify_pass_search")
    @roles_required(Role.GUARD)
    def verify_pass_search():
        rows = passes.find_for_gate(query=request.args.get("q"), on_date=_date_arg() or today_local())
        return jsonify({"passes": [r.to_dict() for r in rows]})

    @app.route("/api/passes/verify-token", methods=["POST"], endpoint="verify_pass_token")
    @roles_required(Role.GUARD)
    def verify_pass_token():
        row = passes.verify_gate_token(token=json_body().get("token"), on_date=today_local())
        return jsonify({"pass": row.to_dict()})

    @app.route("/api/passes/<int:pass_id>/qr", methods=["GET"], endpoint="pass_qr_image")
    @roles_required(Role.STUDENT)
    def pass_qr_image(pass_id: int):
        token = passes.issue_gate_token(student_id=current_user_id(), pass_id=pass_id)
        return send_file(_qr_png(token), mimetype="image/png")
