"""Core domain logic for cycle tracking.

This package contains the ledger, history, statistics and reminder logic,
isolated from storage and presentation for easy testing and reasoning.
"""
