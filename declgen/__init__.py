"""Declaration generator that merges parsed API models with documentation overlays."""

__version__ = "0.1.0"
