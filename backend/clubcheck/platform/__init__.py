"""Request-scoped platform helpers."""
