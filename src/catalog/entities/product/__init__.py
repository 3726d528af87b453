"""Product entity module.

- Product: domain entity exchanged over the API
- ProductTable: database persistence model
- ProductRepository: data access layer
"""

from .entity import Product
from .repository import ProductRepository
from .table import ProductTable

__all__ = ["Product", "ProductRepository", "ProductTable"]
