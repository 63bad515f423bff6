from __future__ import annotations

import logging

from flask import Flask, g, jsonify

from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from ..identity.guards import make_bearer_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.identity_verifier)

    @app.route("/api/progression/tasks/complete", methods=["POST"], endpoint="api_complete_task")
    @bearer_required(Role.STUDENT)
    def api_complete_task():
        student_id = g.identity.user_id
        try:
            award = container.progression_service.claim_task_bonus(student_id)
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        except Exception:
            logger.exception("Unexpected error awarding task bonus student=%s", student_id)
            return jsonify({"error": "Internal error while verifying task"}), 500
        return jsonify(
            {
                "message": f"Task Verified! +{award.xp_awarded} XP",
                "xp": award.new_xp,
                "newBadges": list(award.new_badges),
            }
        ), 200

    @app.route("/api/progression/me", methods=["GET"], endpoint="api_my_progression")
    @bearer_required()
    def api_my_progression():
        try:
            summary = container.progression_service.get_summary(g.identity.user_id)
        except DomainError as e:
            return jsonify(e.to_payload()), e.status_code
        return jsonify(summary), 200
