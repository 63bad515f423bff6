from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from ..identity.guards import make_bearer_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.identity_verifier)

    @app.route("/api/sessions/<session_id>/end", methods=["POST"], endpoint="api_end_session")
    @bearer_required(Role.INSTRUCTOR, Role.ADMIN)
    def api_end_session(session_id: str):
        try:
            ended = container.session_service.end_session(session_id)
        except DomainError as e:
            logger.warning("End session rejected session=%s: %s", session_id, e)
            return jsonify(e.to_payload()), e.status_code
        except Exception:
            logger.exception("Unexpected error ending session=%s", session_id)
            return jsonify({"error": "Internal error while ending session"}), 500
        return jsonify({"message": "Session Ended.", "ended": ended}), 200

    @app.route("/api/sessions/<session_id>/qr", methods=["GET"], endpoint="api_session_qr")
    @bearer_required(Role.INSTRUCTOR, Role.ADMIN)
    def api_session_qr(session_id: str):
        """Current rotating code for the session, with a PNG rendering."""
        try:
            payload = container.session_service.issue_qr(session_id)
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        except Exception:
            logger.exception("Unexpected error issuing QR session=%s", session_id)
            return jsonify({"error": "Internal error while issuing QR code"}), 500
        return jsonify(payload), 200

    @app.route("/api/departments/<institute_id>/<department>/stats", methods=["GET"], endpoint="api_department_stats")
    @bearer_required(Role.INSTRUCTOR, Role.ADMIN)
    def api_department_stats(institute_id: str, department: str):
        try:
            stats = container.session_service.department_stats(institute_id, department)
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        return jsonify(
            {"instituteId": stats.institute_id, "department": stats.department, "totalClasses": stats.total_classes}
        ), 200
