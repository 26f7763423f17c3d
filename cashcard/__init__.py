"""Owner-scoped cash card API."""
