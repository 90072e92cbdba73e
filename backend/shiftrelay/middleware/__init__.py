# Middleware package init
"""
ShiftLog Relay: Middleware Package
====================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: access log line with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
