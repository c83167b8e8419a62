"""Boundary adapters: database, blob storage, message broker, e-mail."""
