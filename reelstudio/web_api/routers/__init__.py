"""API routers for the studio endpoints."""
