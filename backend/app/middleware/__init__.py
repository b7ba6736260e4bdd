# Middleware package init
"""
MailChimp Sync Backend — Middleware Package
=============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Correlation ID shared by every log line of the request
    2. Logging: One access line per request with status and duration
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

    Responses travel back through the chain in reverse, which is when the
    logging middleware measures the duration and the request ID header is
    attached.
"""
