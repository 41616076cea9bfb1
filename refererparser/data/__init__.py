"""Bundled referers dataset."""
