from hypothesis import given

from reloop.events import Event
from strategies import event


@given(event())
def test_event_tuples(event: Event):
    assert Event.from_row(event.to_row()) == event


@given(event())
def test_event_lowercase(event: Event):
    assert event.address == event.address.lower()
    assert event.transaction_hash == event.transaction_hash.lower()
    assert event.uid == f"{event.transaction_hash}-{event.log_index}"
