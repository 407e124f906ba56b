"""Version information for famdocs."""

__version__ = "0.1.0"
