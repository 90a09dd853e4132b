from flask import Blueprint
from sqlalchemy import text

from api.utils.responses import success
from utils.decorators import current_services

bp = Blueprint("health", __name__)

API_VERSION = "1.0.0"


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            success:
              type: boolean
            data:
              type: object
              properties:
                status:
                  type: string
                  example: ok
                database:
                  type: string
                  example: ok
                version:
                  type: string
                  example: 1.0.0
    """
    session = current_services().users.session
    session.execute(text("SELECT 1"))
    return success({"status": "ok", "database": "ok", "version": API_VERSION})
