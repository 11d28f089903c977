"""
Movie catalogue.

- SQLAlchemy movie model
- CRUD service
- Scheduled synchronization from an external films API
"""
