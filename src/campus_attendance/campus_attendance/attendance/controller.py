from __future__ import annotations

import csv
import io
import logging

from flask import Flask, g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..identity.guards import make_bearer_required

logger = logging.getLogger(__name__)

ROSTER_FIELDS = ["session_id", "student_id", "roll_no", "first_name", "last_name", "subject", "status", "marked_at"]


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.identity_verifier)

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_mark_attendance")
    @bearer_required(Role.STUDENT)
    def api_mark_attendance():
        data = request.get_json(silent=True)
        student_id = g.identity.user_id
        raw_token = None
        try:
            if not isinstance(data, dict):
                raise ValidationError("Request body must be a JSON object")
            raw_token = data.get("sessionId") or data.get("token")
            result = container.attendance_service.submit(
                student_id,
                raw_token,
                data.get("studentLocation") or data.get("location"),
            )
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        except Exception:
            logger.exception("Unexpected error marking attendance session=%s student=%s", raw_token or "-", student_id)
            return jsonify({"error": "Internal error while marking attendance"}), 500
        return jsonify(result.to_payload()), 200

    @app.route("/api/attendance/analytics", methods=["GET"], endpoint="api_attendance_analytics")
    @bearer_required(Role.INSTRUCTOR, Role.ADMIN)
    def api_attendance_analytics():
        institute_id = request.args.get("instituteId") or g.identity.institute_id
        try:
            chart = container.analytics_service.weekly_chart(
                institute_id=institute_id,
                subject=request.args.get("subject", ""),
            )
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        except Exception:
            logger.exception("Unexpected error building attendance analytics")
            return jsonify({"error": "Failed"}), 500
        return jsonify({"chartData": chart}), 200

    @app.route("/api/sessions/<session_id>/attendance.csv", methods=["GET"], endpoint="api_session_roster_csv")
    @bearer_required(Role.INSTRUCTOR, Role.ADMIN)
    def api_session_roster_csv(session_id: str):
        try:
            container.session_service.get_session(session_id)
            records = container.attendance_service.list_for_session(session_id)
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=ROSTER_FIELDS)
        writer.writeheader()
        for r in records:
            writer.writerow(
                {
                    "session_id": r.session_id,
                    "student_id": r.student_id,
                    "roll_no": r.roll_no or "",
                    "first_name": r.first_name or "",
                    "last_name": r.last_name or "",
                    "subject": r.subject or "",
                    "status": r.status.value,
                    "marked_at": r.timestamp.isoformat(sep=" ", timespec="seconds"),
                }
            )

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{session_id}.csv"},
        )
