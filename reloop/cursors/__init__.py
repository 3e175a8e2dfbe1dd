"""
Durable positions in the event stream.

Two cursors are kept per chain:

* :data:`FETCHER_CURSOR` is the last block whose logs are saved to the
  local event log.
* :data:`PROJECTOR_CURSOR` is the ``(block_number, log_index)`` of the last
  event applied to the derived tables. It's written in the same transaction
  as the event's changes, so after a crash indexing resumes right after the
  last committed event.
"""

from reloop.cursors.cursor import Cursor, FETCHER_CURSOR, PROJECTOR_CURSOR
from reloop.cursors.repo import CursorsRepo
