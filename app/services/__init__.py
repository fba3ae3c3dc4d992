"""Services Layer: SQL stores, session resolution, ownership guard and the exchange engine.

Invariants:
    - Services are built per request around one explicitly passed AsyncSession
    - Services own transaction boundaries (atomic); stores never commit
    - Notifications are published after commit, never before
"""
