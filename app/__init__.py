"""DevQuery API application package."""
