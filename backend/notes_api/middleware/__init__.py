"""
Notes API Backend - Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: assign the correlation ID first so every log line has it
    2. Logging: log method, path, status and duration under that ID
    3. GZip / CORS: FastAPI's built-in middleware

    The order is reversed for responses, so the request ID header is
    attached last and the logger sees the final status code.
"""
