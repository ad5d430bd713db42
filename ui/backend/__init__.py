"""HTTP API backend."""
