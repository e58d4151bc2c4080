"""
asgi.py -- Application assembly for the product catalog.

This is the ONLY file that imports from both api/ and web/. It joins the two
independent layers into a single ASGI app without coupling them to each other.
api/main.py knows nothing about web/; web/frontend.py knows nothing about api/.

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from api.main import app
from web.frontend import frontend_app

# Mounted last: the frontend mount at "/" must not shadow /health or /api/*.
app.mount("/", frontend_app(), name="frontend")
