"""Data source clients for the Oathplate calculator."""
