"""
Database Infrastructure

Contains SQLAlchemy models and the connection manager.
"""

from .models import Base, CartModel, ProductModel
from .operations import DatabaseManager

__all__ = [
    "Base",
    "CartModel",
    "DatabaseManager",
    "ProductModel",
]
