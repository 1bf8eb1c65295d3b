"""Shared logging and error helpers."""
