"""Encoding helpers for proof responses."""
