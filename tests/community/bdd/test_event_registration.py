"""BDD tests for event registration: seats, refusals and the cancellation cutoff."""

from datetime import UTC, datetime, timedelta

from community.event.event import Event
from community.event.registration import RegisterForEvent
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/event_registration.feature")


def _event(gathering):
    return current_domain.repository_for(Event).get(gathering["event_id"])


@given(parsers.cfparse("an event with {capacity:d} seats starting in {days:d} days"))
def scheduled_event(capacity, days, gathering, make_event):
    gathering["event_id"] = make_event(capacity=capacity, date=datetime.now(UTC) + timedelta(days=days))


@given(parsers.cfparse('"{user}" has registered for the event'))
def registered(user, gathering):
    current_domain.process(RegisterForEvent(event_id=gathering["event_id"], user_id=user), asynchronous=False)


@when(parsers.cfparse('"{user}" registers for the event'))
def registers(user, gathering, error):
    try:
        current_domain.process(RegisterForEvent(event_id=gathering["event_id"], user_id=user), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('"{user}" cancels {hours:d} hours before the start'))
def cancels(user, hours, gathering, error):
    repo = current_domain.repository_for(Event)
    event = _event(gathering)
    try:
        event.cancel_registration(user, now=event.date - timedelta(hours=hours))
    except ValidationError as exc:
        error["exc"] = exc
    else:
        repo.add(event)


@then(parsers.cfparse("the event has {spots:d} seat left"))
@then(parsers.cfparse("the event has {spots:d} seats left"))
def seats_left(spots, gathering):
    assert _event(gathering).available_spots == spots


@then(parsers.cfparse('the registration is refused with "{message}"'))
def refused(message, error):
    assert error["exc"] is not None
    messages = [m for msgs in error["exc"].messages.values() for m in msgs]
    assert message in messages
