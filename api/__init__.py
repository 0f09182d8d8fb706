"""api/ -- HTTP layer: FastAPI app, transport models, routes.

Layer rule: api/ may import from auth/, items/ and core/. Nothing imports api/
except the entry points (asgi.py, main.py) and tests.
"""
