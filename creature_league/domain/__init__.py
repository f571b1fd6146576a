"""Domain layer (pure logic).

- Keep training, condition, scoring and reward rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no file access.
- Prefer deterministic functions (time and seed material passed in as arguments).
"""
