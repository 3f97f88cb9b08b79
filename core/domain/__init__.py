"""Domain models and date arithmetic for cycle tracking."""
