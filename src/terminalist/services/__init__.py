"""Service layer: sync service, background runner and user operations."""
