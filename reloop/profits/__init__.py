"""
Profit cascade payments.

Every resale pays a part of the profit to the prior owners of the token,
generation 0 being the most recent one. Each payment is a
:class:`ProfitDistribution`, linked to its :class:`reloop.sales.Sale`
when both happened in the same transaction.
"""

from reloop.profits.distribution import ProfitDistribution
from reloop.profits.repo import ProfitDistributionsRepo
