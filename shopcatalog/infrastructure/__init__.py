"""Infrastructure layer - configuration, logging, database and file storage."""
