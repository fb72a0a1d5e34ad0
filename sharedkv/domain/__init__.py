"""Domain Layer: errors, value objects and interfaces (ports)."""
