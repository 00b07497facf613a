"""Readers for the two views of a jar: its central directory and its entry stream."""
