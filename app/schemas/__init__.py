"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Request schemas forbid unknown fields (400 instead of silently ignoring them)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
