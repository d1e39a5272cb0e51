"""Routing and fan-out transform for PostgreSQL change events."""
