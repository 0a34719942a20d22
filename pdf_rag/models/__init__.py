"""Domain models shared across layers."""
