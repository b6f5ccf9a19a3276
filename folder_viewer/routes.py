"""
REST API routes for the folder viewer.

- GET    /folders        list every folder (creates the root on first access)
- POST   /folders        create a folder under a parent
- DELETE /folders/<id>   delete a leaf folder
- GET    /health         liveness check

Errors are returned as {"message": str} with the status carried by the error.
"""

import logging

from flask import Blueprint, request, jsonify

from .errors import FolderError
from .services.container import get_services

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


def _json_error(message: str, status: int = 400):
    return jsonify({"message": message}), status


# ============================================================================
# FOLDER ENDPOINTS
# ============================================================================


@bp.get("/folders")
def get_folders():
    """
    Get all folders as a flat list.

    Returns:
        JSON: [{"id": str, "name": str, "parentId": str | null, "createdAt": str}, ...]
    """
    svc = get_services()

    try:
        svc.hierarchy.ensure_root()
        folders = svc.hierarchy.list_all()

        return jsonify([folder.to_json() for folder in folders])

    except FolderError as e:
        return _json_error(e.message, e.status_code)
    except Exception:
        logger.exception("Error retrieving folders")
        return _json_error("Error retrieving folders.", 500)


@bp.post("/folders")
def create_folder():
    """
    Create a new folder.

    Body:
        {"name": str, "parentId": str | null}

    Returns:
        JSON: the created folder (201)
    """
    svc = get_services()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        folder = svc.hierarchy.create(data.get("name"), data.get("parentId") or None)

        return jsonify(folder.to_json()), 201

    except FolderError as e:
        return _json_error(e.message, e.status_code)
    except Exception:
        logger.exception("Error creating folder")
        return _json_error("Error creating folder.", 500)


@bp.delete("/folders/<folder_id>")
def delete_folder(folder_id: str):
    """
    Delete a folder by ID. Only leaf folders other than the root can be deleted.

    Returns:
        JSON: {"message": str}
    """
    svc = get_services()

    try:
        svc.hierarchy.delete(folder_id)

        return jsonify({"message": "Folder deleted successfully."})

    except FolderError as e:
        return _json_error(e.message, e.status_code)
    except Exception:
        logger.exception("Error deleting folder %s", folder_id)
        return _json_error("Error deleting folder.", 500)


@bp.get("/health")
def health():
    """Health check endpoint"""
    return jsonify({"status": "ok"})
