"""HTTP API for the training session scheduler."""
