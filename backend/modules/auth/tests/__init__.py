# backend/modules/auth/tests/__init__.py
