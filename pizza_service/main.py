"""
Name: ASGI Entrypoint

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Preserve the import path used by uvicorn and tests (pizza_service.main:app)

Notes/Constraints:
  - No configuration or IO should live here; keep it thin and predictable
  - Run locally with: uvicorn pizza_service.main:app --reload
"""

from pizza_service.api.main import app

__all__ = ["app"]
