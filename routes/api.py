"""
API routes.

Handles:
- /health - Health check endpoint
"""

from flask import Blueprint, current_app


api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with catalogue status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    catalog_service = current_app.config.get("CATALOG_SERVICE")
    if catalog_service:
        snapshot = catalog_service.get_snapshot()
        health_status["checks"]["catalog"] = {
            "source": str(catalog_service.source_path) if catalog_service.source_path else None,
            "loaded_at": snapshot.loaded_at.isoformat(),
            "products": len(snapshot.products),
            "order_cycles": len(snapshot.order_cycles),
            "distributors": len(snapshot.distributors),
        }
    else:
        health_status["checks"]["catalog"] = "not_available"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
