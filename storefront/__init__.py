"""
Storefront - REST API for a small online shop.

Accounts with bcrypt-hashed passwords, stateless bearer tokens, an Auth
Gate for signed-in routes and a Role Gate for administrator routes, plus
the order and category endpoints those gates protect.
"""

__version__ = "0.1.0"
