"""
Completed marketplace sales.
"""

from reloop.sales.sale import Sale
from reloop.sales.repo import SalesRepo
