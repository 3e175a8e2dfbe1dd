"""
HTTP API over :class:`reloop.query.QueryService`.

+----------------------------------+-----------------------------------------+
| Endpoint                         | Description                             |
+==================================+=========================================+
| ``GET /tokens``                  | Tokens, newest first (``limit``,        |
|                                  | ``offset``)                             |
+----------------------------------+-----------------------------------------+
| ``GET /tokens/{id}``             | Token details                           |
+----------------------------------+-----------------------------------------+
| ``GET /tokens/{id}/profits``     | Profit cascade payments of a token      |
+----------------------------------+-----------------------------------------+
| ``GET /listings``                | Active listings                         |
+----------------------------------+-----------------------------------------+
| ``GET /listings/{id}``           | Active listing of a token               |
+----------------------------------+-----------------------------------------+
| ``GET /sales``                   | Sales, newest first                     |
+----------------------------------+-----------------------------------------+
| ``GET /users/{address}``         | User profile                            |
+----------------------------------+-----------------------------------------+
| ``GET /stats``                   | Marketplace totals                      |
+----------------------------------+-----------------------------------------+
| ``GET /health``                  | Liveness check                          |
+----------------------------------+-----------------------------------------+

Errors are returned as ``{"error": "..."}``.

Run with ``python -m reloop serve`` or ``uvicorn reloop.api:app``.
"""

from .main import app
from .dependencies import get_query_service
