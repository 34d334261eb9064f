"""Root manifest loading."""
