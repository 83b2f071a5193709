"""Object store implementations."""
