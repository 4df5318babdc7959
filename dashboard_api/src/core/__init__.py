"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging setup with correlation id and username context
- Error taxonomy mapped onto HTTP statuses
- Password hashing, the dashboard account and JWT helpers
- FastAPI dependency helpers (stores, services, current user)
"""
