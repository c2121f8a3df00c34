"""Application layer package: use cases and DTOs."""
