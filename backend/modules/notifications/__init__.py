"""
Notifications: announcements, reservation reminders and cancellation
notices, and the role-based rules deciding who sees them.
"""
