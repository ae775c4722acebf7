"""Media engine boundary."""
