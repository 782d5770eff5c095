"""Service layer: user-facing entry points built on the backends."""
