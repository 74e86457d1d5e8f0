"""Service layer: the changelog workflow lives in `services.changelog`."""
