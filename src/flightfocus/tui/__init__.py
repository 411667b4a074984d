"""Textual interface for Flight Focus."""
