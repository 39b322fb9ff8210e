"""DTOs for application services and use cases (no dependency on ORM)."""
