"""
Marketplace listings, one slot per token.
"""

from reloop.listings.listing import Listing
from reloop.listings.repo import ListingsRepo
