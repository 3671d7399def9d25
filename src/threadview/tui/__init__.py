"""Textual interface for browsing threaded comments."""
