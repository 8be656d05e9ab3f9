"""Utility modules for fastjade."""
