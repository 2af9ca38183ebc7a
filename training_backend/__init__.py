"""Training session scheduling backend."""
