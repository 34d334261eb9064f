"""Version models and normalization."""
