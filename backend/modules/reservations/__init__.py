"""
Reservations and the admission rules they must pass: opening hours, daily
capacity, per-user quota and spacing, and the modification window.
"""
