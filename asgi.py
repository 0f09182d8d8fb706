"""
asgi.py -- Application assembly for Stockroom.

The ASGI callable that servers import. Keeping it separate from api/main.py
gives deployment tooling a stable import path (asgi:app) that does not move
if the API package is reorganized.

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from api.main import app

__all__ = ["app"]
