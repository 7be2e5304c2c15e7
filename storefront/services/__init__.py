"""
Document stores for the storefront: users, orders, categories, products.
"""

from storefront.services.users import CredentialStore, DuplicateEmailError
from storefront.services.orders import OrderStore, InvalidOrderStatusError
from storefront.services.categories import CategoryStore
from storefront.services.products import ProductStore

__all__ = [
    "CredentialStore",
    "DuplicateEmailError",
    "OrderStore",
    "InvalidOrderStatusError",
    "CategoryStore",
    "ProductStore",
]
