"""Services Layer - transactional use cases over the ORM models.

Invariants:
    - Each mutating operation commits exactly one transaction; reads never commit
    - The acting Account is always an explicit argument
    - Group-scoped services go through MembershipGuard for plubbing and role checks

Design Decisions:
    - Pure rules live in core/; services only load rows, call the rules and persist
"""
