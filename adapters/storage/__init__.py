"""Snapshot persistence adapters."""
