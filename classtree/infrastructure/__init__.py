"""Infrastructure layer: settings, logging, storage."""
