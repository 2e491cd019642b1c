# backend/modules/reservations/tests/__init__.py

"""
Tests for reservation admission: opening hours, capacity, quota, spacing
and the modification window.
"""
