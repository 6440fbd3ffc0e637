"""Storage infrastructure: database wiring, record store and cache."""
