"""
User management.

- SQLAlchemy user model and roles
- User directory (lookup, create, update, remove)
- Admin user endpoints
"""
