"""HTTP API for the migration."""
