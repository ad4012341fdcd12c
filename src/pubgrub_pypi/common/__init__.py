"""Shared helpers used across registry and resolver modules."""
