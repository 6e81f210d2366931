"""Services subpackage - Shopify access and customer search."""
from .shopify_client import ShopifyClient
from .customer_search import CustomerOption, DebouncedCustomerSearch

__all__ = ['ShopifyClient', 'CustomerOption', 'DebouncedCustomerSearch']
