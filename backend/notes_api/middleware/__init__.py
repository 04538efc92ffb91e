# Middleware package init
"""
Notes API: Middleware Package
=============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate (or accept) a correlation id
    2. Logging: Log method, path, status and duration with that id
    3. CORS: Applied by Starlette's CORSMiddleware

    Responses travel the chain in reverse, so the access log sees the final
    status code and the request id header is added last.
"""
