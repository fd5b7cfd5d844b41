"""Kitchen order printing service."""
