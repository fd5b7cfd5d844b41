"""Kitchen order store and dashboard events."""
