"""Administrative HTTP service over a single relational data engine."""

__version__ = "0.1.0"
