"""
Authentication for the Movies API.

This package provides authentication and authorization services:
- Password hashing
- JWT token handling
- Sign-up, sign-in and refresh-token exchange
- Route access and role guards
"""
