"""
Name: ASGI Entrypoint (app.main)

Responsibilities:
  - Expose `app` for `uvicorn app.main:app`

Collaborators:
  - app.api.main.create_app (wiring, middlewares, lifespan)
"""

from app.api.main import app

__all__ = ["app"]
