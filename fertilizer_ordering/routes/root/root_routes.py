# fertilizer_ordering/routes/root/root_routes.py

import os

from flask import Blueprint, abort, current_app, jsonify, send_from_directory

# Root blueprint
root_bp = Blueprint("root", __name__)


# -----------------------------
# HEALTH CHECK
# -----------------------------
@root_bp.get("/health")
def health():
    return jsonify(status="Server is running"), 200


# -----------------------------
# PREBUILT FRONTEND (optional)
# Serves FRONTEND_DIST with an index.html fallback for client-side routes.
# -----------------------------
@root_bp.get("/", defaults={"path": ""})
@root_bp.get("/<path:path>")
def frontend(path: str):
    dist = current_app.config.get("FRONTEND_DIST")
    if not dist or not os.path.isdir(dist) or path.startswith("api/"):
        abort(404)

    if path and os.path.isfile(os.path.join(dist, path)):
        return send_from_directory(dist, path)
    return send_from_directory(dist, "index.html")
