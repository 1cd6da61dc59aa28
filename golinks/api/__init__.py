"""HTTP API and redirect gateway."""
