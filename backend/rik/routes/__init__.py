# Routes package init
"""
RIK — Built-in Routes
======================

What:  Routes RIK serves on its own, outside the generated /api tree.

Route Inventory:
    - health.py:  GET /health   (service health check)

Resource routes are not declared here: the API builders generate them from
the RIK home at boot.
"""
