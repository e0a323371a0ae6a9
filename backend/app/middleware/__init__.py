# Middleware package init
"""
MessageWall Backend - Middleware Package
==========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: access line with status and duration, tagged with the request ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
