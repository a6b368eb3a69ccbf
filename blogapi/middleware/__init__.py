# Middleware package init
"""
Blog API — Middleware Package
===============================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation id for log lines and the X-Request-ID header
    2. Logging: one access line per request, with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
