"""
Platform fees collected by the marketplace.
"""

from reloop.fees.fee import PlatformFeeRecord
from reloop.fees.repo import PlatformFeesRepo
