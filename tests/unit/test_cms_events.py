from __future__ import annotations

import logging

import pytest

from revalidation_service.domain.events.post_transition import PostTransition
from revalidation_service.domain.events.taxonomy_changed import TaxonomyChanged
from revalidation_service.domain.value_objects.enums import TaxonomyAction
from revalidation_service.infrastructure.bus.change_events import (
    MalformedEventError,
    parse_change_event,
)
from revalidation_service.workers.cms_events_consumer import ChangeEventHandler
from tests.conftest import FakeNotifier, make_dispatcher, make_resolver


def _post_fields(**overrides: str) -> dict[str, str]:
    fields = {
        "event_type": "post.transition",
        "post_type": "post",
        "post_name": "my-post",
        "old_status": "draft",
        "new_status": "publish",
    }
    fields.update(overrides)
    return fields


def test_parse_post_transition():
    event = parse_change_event("post.transition", _post_fields(autosave="1", cron="false"))

    assert event == PostTransition(
        content_type="post",
        slug_token="my-post",
        old_status="draft",
        new_status="publish",
        autosave=True,
        scheduled=False,
    )


def test_parse_post_transition_without_name():
    fields = _post_fields()
    del fields["post_name"]

    event = parse_change_event("post.transition", fields)

    assert isinstance(event, PostTransition)
    assert event.slug_token == ""


def test_parse_post_transition_missing_status():
    fields = _post_fields()
    del fields["new_status"]

    with pytest.raises(MalformedEventError):
        parse_change_event("post.transition", fields)


@pytest.mark.parametrize("action", list(TaxonomyAction))
def test_parse_taxonomy_events(action):
    event = parse_change_event(f"taxonomy.{action}", {"term_id": "12"})

    assert event == TaxonomyChanged(action=action, taxonomy_id=12, taxonomy="category")


def test_parse_taxonomy_bad_term_id():
    with pytest.raises(MalformedEventError):
        parse_change_event("taxonomy.edited", {"term_id": "twelve"})


@pytest.mark.parametrize("event_type", ["comment.created", "taxonomy.merged", "unknown"])
def test_unhandled_event_types(event_type):
    assert parse_change_event(event_type, {"term_id": "1"}) is None


@pytest.mark.asyncio
async def test_handler_dispatches_parsed_event():
    notifier = FakeNotifier()
    handler = ChangeEventHandler(make_dispatcher(notifier))

    await handler("post.transition", _post_fields())
    await handler("taxonomy.created", {"term_id": "4"})

    assert notifier.calls == ["/blog/my-post", "/blog"]


@pytest.mark.asyncio
async def test_handler_ignores_malformed_and_unknown_events():
    notifier = FakeNotifier()
    handler = ChangeEventHandler(make_dispatcher(notifier))

    await handler("taxonomy.deleted", {})
    await handler("user.updated", {"user_id": "1"})

    assert notifier.calls == []


@pytest.mark.asyncio
async def test_handler_tolerates_missing_configuration():
    notifier = FakeNotifier()
    handler = ChangeEventHandler(make_dispatcher(notifier, resolver=make_resolver(secret=None)))

    await handler("post.transition", _post_fields())

    assert notifier.calls == []


@pytest.mark.asyncio
async def test_handler_logs_outcomes_per_event(caplog):
    handler = ChangeEventHandler(make_dispatcher(FakeNotifier()))

    with caplog.at_level(logging.INFO, logger="revalidation_service.workers.cms_events_consumer"):
        await handler("taxonomy.created", {"term_id": "4"})

    assert "taxonomy.created -> /blog=success" in caplog.messages
    assert all(message.isascii() for message in caplog.messages)
