"""HTTP layer for the roster kernel."""
