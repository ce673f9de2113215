"""Backend access: HTTP client, transaction builder and API version guard."""

from content_stack.backend.api_version import ensure_release_support, is_sufficient_api_version
from content_stack.backend.client import SanityClient
from content_stack.backend.transaction import Transaction, Visibility

__all__ = [
    "SanityClient",
    "Transaction",
    "Visibility",
    "ensure_release_support",
    "is_sufficient_api_version",
]
