"""FastAPI routers for the catalog API (products, users/auth)."""
