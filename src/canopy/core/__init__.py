"""Core building blocks shared by every canopy feature."""
