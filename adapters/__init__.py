"""Adapters connecting the core to storage and user interfaces."""
