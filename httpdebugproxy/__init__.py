"""A debugging reverse HTTP proxy that prints each request and response it forwards."""

__version__ = "0.1.0"
__all__ = ["__version__"]