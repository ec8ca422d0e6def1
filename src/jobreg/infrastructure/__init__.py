"""Infrastructure layer: SQLite persistence and the transactional registry."""
