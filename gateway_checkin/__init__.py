"""Daily check-in reward service for the API gateway admin backend."""

__version__ = "1.0.0"
