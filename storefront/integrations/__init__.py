"""
Third-party integrations.
"""

from storefront.integrations.sentry import capture_exception, init_sentry

__all__ = ["capture_exception", "init_sentry"]
