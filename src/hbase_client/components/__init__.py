"""Operations, request builders and the in-memory engine."""
