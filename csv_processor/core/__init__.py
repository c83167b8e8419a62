"""Core parsing logic and domain exceptions."""
