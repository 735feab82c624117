# Middleware package init
"""
Marknote Backend — Middleware Package
=====================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every log line and error body can carry it
    - Logging measures the full handler time including session decoding
    - Session (Starlette SessionMiddleware) populates request.session
"""
