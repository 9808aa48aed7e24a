"""Timed auction HTTP service with batched bid writes over MongoDB."""

__version__ = "0.1.0"