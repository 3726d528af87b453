"""Product catalog service with price, tax and discount computations."""

__version__ = "0.1.0"
