"""
Movies API.

Authenticated CRUD backend for users and movies:
- JWT authentication (sign-up, sign-in, refresh)
- Role-based route guards
- Movie catalogue synchronized from an external films API
"""
