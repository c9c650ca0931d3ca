"""Community prompt library API."""
