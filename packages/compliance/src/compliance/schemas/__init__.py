# This project was developed with assistance from AI tools.
"""Request/response and snapshot schemas for the review core."""
