"""Domain layer - core business entities."""
