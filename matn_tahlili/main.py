"""
Name: ASGI Entrypoint (matn_tahlili.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep the import path used by uvicorn and tests stable

Notes:
  - Run with: uvicorn matn_tahlili.main:app
"""

from matn_tahlili.api.main import app

__all__ = ["app"]
