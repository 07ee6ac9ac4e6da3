# backend/hoteldb/__init__.py
"""
Hotel property-management backend.

The ORM models live in hoteldb/apps/*/models.py; import them from there
(Alembic's env.py does) so Base.metadata sees every table.
"""
