"""Infrastructure Layer - database, JWT, crypto, outbound HTTP clients, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with retry/timeout/error mapping
"""
