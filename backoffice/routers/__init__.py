"""
FastAPI routers grouped by entity.

Each entity module exposes the JSON endpoints under `/api/<entity>`;
`pages` holds the server-rendered views. app.py includes all of them.
"""
