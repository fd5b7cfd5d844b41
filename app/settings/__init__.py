"""Dashboard settings stored at runtime (printer, audio)."""
