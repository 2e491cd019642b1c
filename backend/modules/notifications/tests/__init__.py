# backend/modules/notifications/tests/__init__.py

"""
Tests for notification targeting, visibility and lifecycle.
"""
