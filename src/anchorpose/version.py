"""Version information for Anchorpose."""

__version__ = "0.1.0"
