"""
Read-only query surface of the indexer.

:class:`QueryService` composes the derived tables into the payloads
served by :mod:`reloop.api`.

Example:
    ::

        from reloop.query import QueryService

        service = QueryService.create(db_path="reloop.db")
        service.get_user("0xAbC...")["stats"]["tokensMinted"]
        # => 3
"""

from reloop.query.service import QueryService, DEFAULT_LIMIT, MAX_LIMIT
