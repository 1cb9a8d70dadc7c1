"""Application layer: interfaces, DTOs, and the resolution services."""
