# Middleware package init
"""
QuickNotes Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line carries it; the logger
    measures everything inside it, including CORS handling.
"""
