"""Infrastructure Layer: database, logging, password hashing and notification delivery.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External failures are mapped (DatabaseError) or contained (notifications)
"""
