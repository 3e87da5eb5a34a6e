# Middleware package init
"""
Employee Manager API — Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: assign the correlation ID first
    2. Logging: log method, path, status, duration with that ID

    The order is reversed for responses:
    Response ← [Request ID] ← [Logging] ← Route Handler
"""
