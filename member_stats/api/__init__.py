"""HTTP API for member statistics."""
