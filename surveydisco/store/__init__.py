"""CRUD for the TODO card and application settings."""
