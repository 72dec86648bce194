"""Endpoint modules for the task REST API."""
