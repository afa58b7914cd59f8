"""HTTP API for the yacht charter site."""
