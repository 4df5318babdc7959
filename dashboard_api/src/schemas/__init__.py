"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by area (auth, clients, dashboard) and also include the
common response envelope and pagination models.
"""

from .common import ApiResponse, PaginatedResponse  # noqa: F401
