"""HTTP runtime for the directory: services, storage and API routes."""
