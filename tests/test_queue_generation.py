"""Tests for daily queue generation."""

from __future__ import annotations

from datetime import timedelta

from netgrowth.models import QueueItem
from netgrowth.services.dates import resolve_run_clock
from netgrowth.services.queue.queue_generation import (
    count_week_connection_requests,
    generate_daily_queue,
)
from netgrowth.services.queue.templates import EXCEEDS_LENGTH_NOTE
from tests.factories import (
    add_interaction,
    add_score_history,
    add_status_history,
    make_category,
    make_contact,
    make_queue_item,
    make_template,
)
from tests.test_constants import TEST_NOW, TEST_TODAY, TEST_WEEK_START

YESTERDAY = TEST_TODAY - timedelta(days=1)


def _generate(db, **overrides):
    params = dict(max_new_requests=3, weekly_limit=100, queue_date=TEST_TODAY, now=TEST_NOW)
    params.update(overrides)
    return generate_daily_queue(db, **params)


def _items(db, **filters) -> list[QueueItem]:
    query = db.query(QueueItem)
    for key, value in filters.items():
        query = query.filter(getattr(QueueItem, key) == value)
    return query.order_by(QueueItem.id).all()


def _executed_request(db, contact, executed_at):
    return make_queue_item(
        db,
        contact,
        executed_at.date(),
        status="executed",
        executed_at=executed_at,
    )


# ── Connection requests ────────────────────────────────────────────


class TestConnectionRequests:
    def test_top_priority_targets_fill_the_slots(self, seeded_db) -> None:
        contacts = [make_contact(seeded_db, priority_score=float(i)) for i in range(1, 11)]
        make_template(seeded_db, "Hi {{first_name}}, great to see {{company}} growing.")

        result = _generate(seeded_db)

        assert result.connection_requests == 3
        assert result.total == 3
        assert result.flagged_for_editing == 0
        items = _items(seeded_db, queue_date=TEST_TODAY)
        assert {i.contact_id for i in items} == {c.id for c in contacts[-3:]}
        assert all(i.action_type == "connection_request" for i in items)
        assert all(i.status == "pending" for i in items)
        top = next(i for i in items if i.contact_id == contacts[-1].id)
        assert top.personalized_message == (
            f"Hi {contacts[-1].first_name}, great to see {contacts[-1].company} growing."
        )
        assert top.notes is None

    def test_long_message_is_flagged(self, seeded_db) -> None:
        category = make_category(seeded_db, "Long Winded", 5)
        wordy = make_contact(seeded_db, priority_score=9.0)
        wordy.categories.append(category)
        seeded_db.commit()
        brief = make_contact(seeded_db, priority_score=8.0)
        make_template(seeded_db, "Hi {{first_name}}!", name="short")
        make_template(
            seeded_db, "Hello {{first_name}}. " + "x" * 300, name="long", category_id=category.id
        )

        result = _generate(seeded_db)

        assert result.connection_requests == 2
        assert result.flagged_for_editing == 1
        flagged = _items(seeded_db, contact_id=wordy.id)[0]
        assert flagged.notes == EXCEEDS_LENGTH_NOTE
        assert len(flagged.personalized_message) > 300
        plain = _items(seeded_db, contact_id=brief.id)[0]
        assert plain.notes is None
        assert plain.personalized_message == f"Hi {brief.first_name}!"

    def test_no_templates_leaves_message_empty(self, seeded_db) -> None:
        make_contact(seeded_db, priority_score=5.0)
        _generate(seeded_db)
        item = _items(seeded_db)[0]
        assert item.template_id is None
        assert item.personalized_message is None

    def test_null_priority_sorts_last(self, seeded_db) -> None:
        make_contact(seeded_db, priority_score=None)
        scored = make_contact(seeded_db, priority_score=2.5)

        _generate(seeded_db, max_new_requests=1)

        assert [i.contact_id for i in _items(seeded_db)] == [scored.id]

    def test_only_live_targets_are_queued(self, seeded_db) -> None:
        make_contact(seeded_db, status="requested", priority_score=9.0)
        make_contact(seeded_db, priority_score=9.0, deleted_at=TEST_NOW)
        target = make_contact(seeded_db, priority_score=1.0)

        result = _generate(seeded_db)

        assert result.connection_requests == 1
        assert _items(seeded_db)[0].contact_id == target.id

    def test_rerun_same_day_adds_nothing(self, seeded_db) -> None:
        for i in range(6):
            make_contact(seeded_db, priority_score=float(i))

        _generate(seeded_db)
        again = _generate(seeded_db)

        assert again.connection_requests == 0
        assert len(_items(seeded_db, queue_date=TEST_TODAY)) == 3

    def test_rerun_with_higher_limit_tops_up(self, seeded_db) -> None:
        for i in range(6):
            make_contact(seeded_db, priority_score=float(i))

        _generate(seeded_db, max_new_requests=2)
        again = _generate(seeded_db, max_new_requests=5)

        assert again.connection_requests == 3
        contact_ids = [i.contact_id for i in _items(seeded_db)]
        assert len(contact_ids) == len(set(contact_ids)) == 5


# ── Weekly cap ─────────────────────────────────────────────────────


class TestWeeklyCap:
    def test_exhausted_cap_writes_nothing(self, seeded_db) -> None:
        sent = [make_contact(seeded_db, status="requested") for _ in range(2)]
        for contact in sent:
            _executed_request(seeded_db, contact, TEST_NOW - timedelta(days=1))
        make_contact(seeded_db, priority_score=5.0)
        connected = make_contact(seeded_db, status="connected")
        add_status_history(seeded_db, connected, "connected", TEST_NOW - timedelta(days=1))

        result = _generate(seeded_db, weekly_limit=2)

        assert result.total == 0
        assert result.connection_requests == 0
        assert result.follow_ups == 0
        assert len(_items(seeded_db)) == 2

    def test_remaining_capacity_limits_slots(self, seeded_db) -> None:
        for _ in range(4):
            _executed_request(seeded_db, make_contact(seeded_db, status="requested"), TEST_NOW)
        for i in range(5):
            make_contact(seeded_db, priority_score=float(i))

        result = _generate(seeded_db, max_new_requests=3, weekly_limit=5)

        assert result.connection_requests == 1

    def test_previous_week_does_not_count(self, seeded_db) -> None:
        last_friday = TEST_NOW - timedelta(days=5)
        for _ in range(3):
            _executed_request(seeded_db, make_contact(seeded_db, status="requested"), last_friday)

        assert count_week_connection_requests(seeded_db, TEST_TODAY) == 0

    def test_counts_executed_and_active_this_week(self, seeded_db) -> None:
        _executed_request(seeded_db, make_contact(seeded_db, status="requested"), TEST_NOW)
        make_queue_item(seeded_db, make_contact(seeded_db), TEST_WEEK_START, status="approved")
        make_queue_item(seeded_db, make_contact(seeded_db), TEST_WEEK_START, status="skipped")
        make_queue_item(
            seeded_db, make_contact(seeded_db), TEST_WEEK_START, action_type="follow_up"
        )
        # pending from last week is carried into this one
        make_queue_item(seeded_db, make_contact(seeded_db), TEST_WEEK_START - timedelta(days=3))

        assert count_week_connection_requests(seeded_db, TEST_TODAY) == 3


# ── Carry-over and exclusions ──────────────────────────────────────


class TestCarryOver:
    def test_pending_items_move_to_today_and_use_budget(self, seeded_db) -> None:
        stale_contact = make_contact(seeded_db, priority_score=10.0)
        stale = make_queue_item(seeded_db, stale_contact, YESTERDAY)
        for i in range(5):
            make_contact(seeded_db, priority_score=float(i))

        result = _generate(seeded_db)

        assert result.carried_over == 1
        assert result.connection_requests == 2
        assert result.total == 3
        seeded_db.refresh(stale)
        assert stale.queue_date == TEST_TODAY
        assert len(_items(seeded_db, contact_id=stale_contact.id)) == 1

    def test_carried_follow_up_uses_request_budget(self, seeded_db) -> None:
        carried = make_contact(seeded_db, status="connected")
        stale = make_queue_item(seeded_db, carried, YESTERDAY, action_type="follow_up")
        for i in range(5):
            make_contact(seeded_db, priority_score=float(i))

        result = _generate(seeded_db)

        assert result.carried_over == 1
        assert result.connection_requests == 2
        seeded_db.refresh(stale)
        assert stale.queue_date == TEST_TODAY
        assert stale.carried_from == YESTERDAY

    def test_rerun_after_carry_over_adds_nothing(self, seeded_db) -> None:
        carried = make_contact(seeded_db, status="connected")
        make_queue_item(seeded_db, carried, YESTERDAY, action_type="follow_up")
        for i in range(5):
            make_contact(seeded_db, priority_score=float(i))

        _generate(seeded_db)
        again = _generate(seeded_db)

        assert again.carried_over == 0
        assert again.connection_requests == 0
        assert len(_items(seeded_db, queue_date=TEST_TODAY)) == 3

    def test_duplicate_stale_item_is_superseded(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        make_queue_item(seeded_db, contact, TEST_TODAY, action_type="follow_up")
        stale = make_queue_item(seeded_db, contact, YESTERDAY, action_type="follow_up")

        result = _generate(seeded_db)

        assert result.carried_over == 0
        seeded_db.refresh(stale)
        assert stale.status == "skipped"
        assert stale.queue_date == YESTERDAY

    def test_snoozed_contact_is_excluded_until_date(self, seeded_db) -> None:
        snoozed = make_contact(seeded_db, priority_score=9.0)
        make_queue_item(
            seeded_db,
            snoozed,
            YESTERDAY,
            status="snoozed",
            snooze_until=TEST_TODAY + timedelta(days=2),
        )
        woken = make_contact(seeded_db, priority_score=8.0)
        make_queue_item(
            seeded_db,
            woken,
            YESTERDAY - timedelta(days=3),
            status="snoozed",
            snooze_until=YESTERDAY,
        )

        _generate(seeded_db)

        today_ids = {i.contact_id for i in _items(seeded_db, queue_date=TEST_TODAY)}
        assert snoozed.id not in today_ids
        assert woken.id in today_ids

    def test_approved_items_are_not_carried(self, seeded_db) -> None:
        contact = make_contact(seeded_db, priority_score=9.0)
        approved = make_queue_item(seeded_db, contact, YESTERDAY, status="approved")

        result = _generate(seeded_db)

        assert result.carried_over == 0
        seeded_db.refresh(approved)
        assert approved.queue_date == YESTERDAY
        assert _items(seeded_db, queue_date=TEST_TODAY) == []


# ── Follow-ups ─────────────────────────────────────────────────────


class TestFollowUps:
    def test_new_connection_without_message_gets_follow_up(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_status_history(
            seeded_db, contact, "connected", TEST_NOW - timedelta(days=2), from_status="requested"
        )
        add_interaction(seeded_db, contact, "linkedin_dm_received", TEST_NOW - timedelta(days=1))

        result = _generate(seeded_db)

        assert result.follow_ups == 1
        item = _items(seeded_db, contact_id=contact.id)[0]
        assert item.action_type == "follow_up"
        assert item.notes == "Connected on 2026-03-02"

    def test_window_is_measured_from_queue_date(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=1))

        result = generate_daily_queue(
            seeded_db, max_new_requests=3, weekly_limit=100, queue_date=TEST_TODAY
        )

        assert result.follow_ups == 1
        assert _items(seeded_db, contact_id=contact.id)[0].queue_date == TEST_TODAY

    def test_old_connection_is_ignored(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=10))
        assert _generate(seeded_db).follow_ups == 0

    def test_outbound_message_since_connection_suppresses(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=3))
        add_interaction(seeded_db, contact, "email", TEST_NOW - timedelta(days=1))
        assert _generate(seeded_db).follow_ups == 0

    def test_message_before_connection_does_not_suppress(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_interaction(seeded_db, contact, "linkedin_message", TEST_NOW - timedelta(days=20))
        add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=3))
        assert _generate(seeded_db).follow_ups == 1

    def test_contact_with_active_item_is_not_duplicated(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=1))
        make_queue_item(seeded_db, contact, TEST_TODAY, action_type="re_engagement")

        assert _generate(seeded_db).follow_ups == 0
        assert len(_items(seeded_db, contact_id=contact.id)) == 1

    def test_capped_per_run(self, seeded_db) -> None:
        for _ in range(12):
            contact = make_contact(seeded_db, status="connected")
            add_status_history(seeded_db, contact, "connected", TEST_NOW - timedelta(days=1))
        assert _generate(seeded_db).follow_ups == 10


# ── Re-engagements ─────────────────────────────────────────────────


class TestReEngagements:
    def test_score_drop_over_15_queues_re_engagement(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="engaged", relationship_score=40)
        add_score_history(seeded_db, contact, 60, TEST_TODAY - timedelta(days=20))
        add_score_history(seeded_db, contact, 45, TEST_TODAY - timedelta(days=5))

        result = _generate(seeded_db)

        assert result.re_engagements == 1
        item = _items(seeded_db, contact_id=contact.id)[0]
        assert item.action_type == "re_engagement"
        assert item.notes == "Score dropped from 60 to 40"

    def test_drop_of_exactly_15_is_ignored(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="relationship", relationship_score=40)
        add_score_history(seeded_db, contact, 55, TEST_TODAY - timedelta(days=10))
        assert _generate(seeded_db).re_engagements == 0

    def test_history_outside_window_is_ignored(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="engaged", relationship_score=10)
        add_score_history(seeded_db, contact, 80, TEST_TODAY - timedelta(days=45))
        assert _generate(seeded_db).re_engagements == 0

    def test_connected_contacts_are_not_re_engaged(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected", relationship_score=5)
        add_score_history(seeded_db, contact, 80, TEST_TODAY - timedelta(days=5))
        assert _generate(seeded_db).re_engagements == 0


def test_total_sums_every_step(seeded_db) -> None:
    carried = make_contact(seeded_db, status="connected")
    make_queue_item(seeded_db, carried, YESTERDAY, action_type="follow_up")
    make_contact(seeded_db, priority_score=3.0)
    fresh = make_contact(seeded_db, status="connected")
    add_status_history(seeded_db, fresh, "connected", TEST_NOW - timedelta(days=1))
    cooling = make_contact(seeded_db, status="engaged", relationship_score=20)
    add_score_history(seeded_db, cooling, 50, TEST_TODAY - timedelta(days=7))

    result = _generate(seeded_db)

    assert result.to_dict() == {
        "connection_requests": 1,
        "follow_ups": 1,
        "re_engagements": 1,
        "carried_over": 1,
        "total": 4,
        "flagged_for_editing": 0,
    }


class TestRunClock:
    def test_queue_date_alone_ends_at_midnight_utc(self) -> None:
        queue_date, now = resolve_run_clock(TEST_TODAY, None)
        assert queue_date == TEST_TODAY
        assert now == TEST_NOW.replace(day=5, hour=0)

    def test_explicit_now_wins(self) -> None:
        assert resolve_run_clock(TEST_TODAY, TEST_NOW) == (TEST_TODAY, TEST_NOW)
        assert resolve_run_clock(None, TEST_NOW) == (TEST_TODAY, TEST_NOW)
