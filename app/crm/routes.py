from flask import Blueprint, current_app

bp = Blueprint("routes", __name__)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON, including schema health."""
    return {
        "ok": True,
        "schema_ok": bool(current_app.config.get("_schema_health_ok", True)),
    }


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200
