"""Use cases grouped by feature."""
