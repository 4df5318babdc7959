"""
API route modules.

This package contains subrouters for:
- Auth: login and current user
- Clients: paginated société listing and single lookup
- Dashboard: aggregate statistics
- Diagnostic: store connection status, probe and forced reconnection

Routers are included from src.api.main (under the /api prefix).
"""
