"""API Layer - FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the {statusCode, message, data} envelope

Design Decisions:
    - Thin routes delegate to services; the principal arrives via deps.get_current_account
"""
