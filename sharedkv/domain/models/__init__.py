"""Domain value objects shared across layers."""
