"""HTTP surface for the display core."""
