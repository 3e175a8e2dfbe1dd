"""
Module for making static calls to the ReLoop contracts.

The main class of this module is :class:`CallsService`. The indexer uses
it to resolve a token's metadata URI when the token is minted.

Example:
    ::

        from reloop.calls import CallsService

        service = CallsService.create()
        service.token_uri("0xaA4886d00e3A22aB6f4b5105CC782B1C29c3d910", 7, 33427600)
        # => "ipfs://Qm..."
"""

from reloop.calls.call import Call
from reloop.calls.repo import CallsRepo
from reloop.calls.service import CallsService
