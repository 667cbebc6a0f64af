"""
Use Cases

Contains the business use cases of the application.
"""

from .cart_management_use_case import CartManagementUseCase

__all__ = [
    'CartManagementUseCase'
]
