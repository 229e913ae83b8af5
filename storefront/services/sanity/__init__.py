from .client import SanityClient, PRODUCT_SHIPPING_QUERY
