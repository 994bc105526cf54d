"""Bioscience publication explorer."""

__version__ = "0.1.0"
