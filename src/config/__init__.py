"""Environment-driven settings."""
