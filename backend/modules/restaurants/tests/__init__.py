# backend/modules/restaurants/tests/__init__.py
