"""Service layer: question bank cache and in-memory sessions."""
