# Middleware package init
"""
RIK — Middleware Package
=========================

What:  Cross-cutting concerns applied to every request, generated routes and
       customization routes alike.

Middleware Chain:
    Request → [Request ID] → [Access Logging] → Route Handler

    Request ID runs first so the access log line and any error body carry the
    same correlation ID. Starlette runs middleware in reverse order of
    addition: create_app() adds Logging first, then Request ID.
"""
