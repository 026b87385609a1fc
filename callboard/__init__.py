"""REST backend for call-center agents, groups and their indicators."""

__version__ = "1.0.0"
