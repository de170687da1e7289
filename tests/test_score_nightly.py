"""Tests for the relationship scoring batch job."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

from netgrowth.models import JobRun, ScoreHistory
from netgrowth.services.scoring.relationship_engine import (
    calculate_contact_score,
    recalculate_contact_score,
)
from netgrowth.services.scoring.score_batch import run_scoring_batch, upsert_score_history
from tests.factories import add_interaction, add_score_history, make_contact
from tests.test_constants import TEST_NOW, TEST_TODAY


def _history(db, contact_id: int) -> list[ScoreHistory]:
    return (
        db.query(ScoreHistory)
        .filter(ScoreHistory.contact_id == contact_id)
        .order_by(ScoreHistory.recorded_at)
        .all()
    )


class TestRunScoringBatch:
    def test_scores_all_contacts_and_records_job(self, seeded_db) -> None:
        fresh = make_contact(seeded_db, status="connected")
        add_interaction(seeded_db, fresh, "meeting_1on1_inperson", TEST_NOW)
        idle = make_contact(seeded_db, status="target")

        result = run_scoring_batch(seeded_db, now=TEST_NOW)

        assert result["status"] == "completed"
        assert result["processed"] == 2
        assert result["updated"] == 1
        assert result["failed"] == 0
        assert result["error"] is None
        seeded_db.refresh(fresh)
        seeded_db.refresh(idle)
        assert fresh.relationship_score == 10
        assert idle.relationship_score == 0

        job = seeded_db.get(JobRun, result["job_run_id"])
        assert job.job_type == "score"
        assert job.status == "completed"
        assert job.contacts_processed == 2
        assert job.contacts_updated == 1
        assert job.finished_at is not None

    def test_writes_one_history_row_per_day(self, seeded_db) -> None:
        contact = make_contact(seeded_db)
        add_interaction(seeded_db, contact, "email", TEST_NOW)

        run_scoring_batch(seeded_db, now=TEST_NOW)
        add_interaction(seeded_db, contact, "email", TEST_NOW)
        run_scoring_batch(seeded_db, now=TEST_NOW + timedelta(hours=2))

        rows = _history(seeded_db, contact.id)
        assert len(rows) == 1
        assert rows[0].recorded_at == TEST_TODAY
        assert float(rows[0].score_value) == 7

    def test_applies_transitions(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="connected")
        for _ in range(4):
            add_interaction(seeded_db, contact, "meeting_1on1_inperson", TEST_NOW)

        result = run_scoring_batch(seeded_db, now=TEST_NOW)

        assert result["transitions"] == 1
        seeded_db.refresh(contact)
        assert contact.relationship_score == 40
        assert contact.status == "engaged"

    def test_demotes_after_sustained_low_score(self, seeded_db) -> None:
        contact = make_contact(seeded_db, status="engaged", relationship_score=40)
        add_score_history(seeded_db, contact, 40, TEST_TODAY - timedelta(days=45))

        result = run_scoring_batch(seeded_db, now=TEST_NOW)

        assert result["transitions"] == 1
        seeded_db.refresh(contact)
        assert contact.status == "connected"

    def test_skips_deleted_contacts(self, seeded_db) -> None:
        make_contact(seeded_db, deleted_at=TEST_NOW)
        result = run_scoring_batch(seeded_db, now=TEST_NOW)
        assert result["processed"] == 0

    def test_one_failure_does_not_stop_the_batch(self, seeded_db) -> None:
        first = make_contact(seeded_db)
        second = make_contact(seeded_db)

        with patch(
            "netgrowth.services.scoring.score_batch.compute_relationship_score",
            side_effect=[RuntimeError("boom"), 7],
        ):
            result = run_scoring_batch(seeded_db, now=TEST_NOW)

        assert result["status"] == "completed"
        assert result["processed"] == 1
        assert result["failed"] == 1
        assert f"Contact {first.id}: boom" in result["error"]
        seeded_db.refresh(second)
        assert second.relationship_score == 7
        job = seeded_db.get(JobRun, result["job_run_id"])
        assert "boom" in job.error_message

    def test_config_failure_marks_job_failed(self, seeded_db) -> None:
        with patch(
            "netgrowth.services.scoring.score_batch.load_scoring_config",
            side_effect=RuntimeError("config unavailable"),
        ):
            result = run_scoring_batch(seeded_db, now=TEST_NOW)

        assert result["status"] == "failed"
        assert result["error"] == "config unavailable"
        job = seeded_db.get(JobRun, result["job_run_id"])
        assert job.status == "failed"


class TestUpsertScoreHistory:
    def test_upsert_updates_existing_row(self, db) -> None:
        contact = make_contact(db)
        upsert_score_history(db, contact.id, "relationship", 10, TEST_TODAY)
        db.commit()
        upsert_score_history(db, contact.id, "relationship", 12, TEST_TODAY)
        db.commit()

        rows = _history(db, contact.id)
        assert len(rows) == 1
        assert float(rows[0].score_value) == 12

    def test_score_types_are_separate(self, db) -> None:
        contact = make_contact(db)
        upsert_score_history(db, contact.id, "relationship", 10, TEST_TODAY)
        upsert_score_history(db, contact.id, "priority", 4.5, TEST_TODAY)
        db.commit()
        assert len(_history(db, contact.id)) == 2


class TestSingleContactScore:
    def test_calculate_does_not_persist(self, seeded_db) -> None:
        contact = make_contact(seeded_db)
        add_interaction(seeded_db, contact, "meeting_1on1_inperson", TEST_NOW)

        assert calculate_contact_score(seeded_db, contact.id, now=TEST_NOW) == 10
        seeded_db.refresh(contact)
        assert contact.relationship_score == 0

    def test_recalculate_persists(self, seeded_db) -> None:
        contact = make_contact(seeded_db)
        add_interaction(seeded_db, contact, "meeting_1on1_inperson", TEST_NOW)

        assert recalculate_contact_score(seeded_db, contact.id, now=TEST_NOW) == 10
        seeded_db.refresh(contact)
        assert contact.relationship_score == 10

    def test_missing_contact(self, seeded_db) -> None:
        assert calculate_contact_score(seeded_db, 12345, now=TEST_NOW) is None
        assert recalculate_contact_score(seeded_db, 12345, now=TEST_NOW) is None
