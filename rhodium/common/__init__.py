"""Small helpers shared across Rhodium packages."""
