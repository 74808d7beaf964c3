"""Concurrent headline aggregation."""
