"""Source-state naming, actual state, persistent state, age encryption and archive reading for home directory management."""

__version__ = "0.1.0"