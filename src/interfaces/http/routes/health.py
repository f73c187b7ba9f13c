from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from src.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/healthz")
def healthz():
    status = 200
    checks = {}

    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:  # pragma: no cover - DB failure path
        current_app.logger.error("Health check database probe failed: %s", exc)
        status = 503
        checks["database"] = f"error: {exc}"

    catalog = current_app.extensions.get("catalog_service")
    checks["catalog"] = "ok" if catalog is not None and catalog.sp is not None else "unavailable"

    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status
