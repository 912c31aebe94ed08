"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Field names are snake_case in Python and camelCase on the wire

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
