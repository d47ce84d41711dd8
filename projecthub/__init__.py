"""projecthub: project tracking API with real-time update notifications."""
