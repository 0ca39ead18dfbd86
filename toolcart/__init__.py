"""ToolCart - one set of commerce operations for people and agents."""

__version__ = "0.1.0"
