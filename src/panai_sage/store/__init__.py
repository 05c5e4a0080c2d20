"""In-memory stores for sessions and tasks."""
