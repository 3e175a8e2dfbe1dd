"""
Module for turning the event log into marketplace state.

:class:`Projector` consumes :class:`reloop.events.Event` in chain order
and dispatches them to :data:`HANDLERS`, one per event type.

Example:
    ::

        from reloop.events import EventsService
        from reloop.projector import Projector

        EventsService.create().sync()
        Projector.create().run()
"""

from reloop.projector.handlers import HANDLERS
from reloop.projector.service import Projector
