# This project was developed with assistance from AI tools.
"""Vendor compliance review core."""

__version__ = "0.1.0"
