"""Services Layer — use cases over the database and the LLM client.

Invariants:
    - Every mutation commits inside the service; routes never commit
    - booking_ledger.py is the only writer of availabilities and bookings

Design Decisions:
    - Plain module functions taking the caller's AsyncSession (no service classes)
"""
