"""Liveness probe."""

from __future__ import annotations

import os

from flask import Blueprint, Response, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """
    Report that the service is running.

    Public endpoint polled by load balancers and orchestrators.
    """
    return jsonify(
        {
            "status": "healthy",
            "service": "todo-api",
            "environment": os.getenv("ENVIRONMENT", "unknown"),
        }
    ), 200
