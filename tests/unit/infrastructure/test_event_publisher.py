"""Tests for the in-memory event publisher."""

from unittest.mock import AsyncMock

import pytest

from src.domain.events import EmailChangeCancelledEvent, EmailChangeRequestedEvent
from src.infrastructure.services.event_publisher import InMemoryEventPublisher


def _requested(user_id="u1"):
    return EmailChangeRequestedEvent.create(
        user_id=user_id, pending_email="new***@x.com", token_prefix="abcdefgh"
    )


@pytest.mark.asyncio
async def test_publish_records_and_filters_events():
    publisher = InMemoryEventPublisher()

    await publisher.publish_many(
        [_requested("u1"), _requested("u2"), EmailChangeCancelledEvent.create("u1", "new***@x.com")]
    )

    assert len(publisher.get_published_events()) == 3
    assert len(publisher.get_published_events(EmailChangeRequestedEvent)) == 2
    assert len(publisher.get_published_events(user_id="u1")) == 2
    assert len(publisher.get_published_events(EmailChangeCancelledEvent, user_id="u2")) == 0

    publisher.clear_published_events()
    assert publisher.get_published_events() == []


@pytest.mark.asyncio
async def test_subscribers_receive_events():
    publisher = InMemoryEventPublisher()
    subscriber = AsyncMock()
    publisher.add_subscriber(subscriber)
    event = _requested()

    await publisher.publish(event)

    subscriber.assert_awaited_once_with(event)


@pytest.mark.asyncio
async def test_subscriber_failure_is_contained():
    publisher = InMemoryEventPublisher()
    failing = AsyncMock(side_effect=RuntimeError("audit sink down"))
    healthy = AsyncMock()
    publisher.add_subscriber(failing)
    publisher.add_subscriber(healthy)

    await publisher.publish(_requested())

    healthy.assert_awaited_once()
    assert len(publisher.get_published_events()) == 1
