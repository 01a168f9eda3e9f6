"""
RIK — Response Schemas
=======================

What:  Pydantic models for the built-in routes (health checks, errors).
"""
