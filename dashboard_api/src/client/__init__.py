"""
Python client for the dashboard API: bearer token handling and logout on 401.
"""

from .api_client import ApiClientError, DashboardClient  # noqa: F401
