"""Local movie matching engine, poster asset cache and background prefetch service."""
