"""Neuroevolution in a 2D obstacle arena."""

__version__ = "0.1.0"
