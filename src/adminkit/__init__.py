"""adminkit: descriptor-driven generic CRUD administration engine."""

__version__ = "0.1.0"
