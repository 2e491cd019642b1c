# backend/modules/restaurants/__init__.py

"""
Restaurant listings, their operating hours and daily capacity, and the
cascade that runs when a restaurant is removed.
"""
