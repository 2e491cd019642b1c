"""
User accounts, roles and account removal.
"""
