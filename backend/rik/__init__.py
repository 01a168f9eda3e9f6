"""
RIK — Application Package Initializer
======================================

What:  Marks the `rik` directory as a Python package.
Why:   Enables module imports like `from rik.config import settings`.
Who:   Used by uvicorn (`rik.main:create_app`), by pytest, and by resource
       controllers importing `rik.controller`.

Architecture Note:
    RIK builds a versioned REST API out of a directory tree:

    ┌─────────────────────────────────────┐
    │      Boot sequence (rik.main)       │  ← FastAPI app, middleware, hooks
    ├─────────────────────────────────────┤
    │   API builders (path / header)      │  ← route wiring per version
    ├─────────────────────────────────────┤
    │     Home manager (services)         │  ← discovery, loading, validation
    ├─────────────────────────────────────┤
    │   RIK home on disk (v1/, v2/ ...)   │  ← controllers, schemas, hooks
    └─────────────────────────────────────┘

    The home manager never touches HTTP; the builders never touch the
    filesystem layout directly. Each layer is testable on its own.
"""

__version__ = "1.0.0"
