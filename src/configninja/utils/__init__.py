"""Utility modules for configninja."""
