"""CSV processor: asynchronous CSV ingestion and change notification service."""
