"""
Tests for the ReviewProcessor class.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from vocasrs.exceptions import CardNotFoundError, InvalidQualityError
from vocasrs.models import CardState, ReviewQuality
from vocasrs.review_processor import ReviewProcessor
from vocasrs.scheduler import SM2Scheduler
from vocasrs.stats import StudyStats
from vocasrs.store import InMemoryCardStore


class TestReviewProcessor:
    """Test the ReviewProcessor class."""

    @pytest.fixture
    def store(self):
        return InMemoryCardStore()

    @pytest.fixture
    def stats(self):
        return StudyStats()

    @pytest.fixture
    def processor(self, store, scheduler, stats):
        return ReviewProcessor(store, scheduler, stats)

    def test_process_review_saves_updated_card(self, processor, store, make_card, review_ts):
        card = make_card(state=CardState.Review, interval=4, groups={"verbs"})
        store.save_card(card)

        outcome = processor.process_review(card, 4, reviewed_at=review_ts)

        saved = store.get_card(card.id)
        assert saved == outcome.card
        assert saved.interval == 10
        assert saved.due_date == review_ts + timedelta(days=10)
        assert outcome.card_id == card.id
        assert outcome.quality is ReviewQuality.Easy
        assert outcome.previous_state == CardState.Review
        assert outcome.new_state == CardState.Review
        assert outcome.group_ids == frozenset({"verbs"})
        assert outcome.correct
        assert not outcome.lapsed

    def test_process_review_updates_stats(self, processor, stats, make_card, review_ts):
        card = make_card(groups={"verbs"})

        processor.process_review(card, 1, reviewed_at=review_ts)

        assert stats.total_studied == 1
        assert stats.total_correct == 0
        assert stats.by_group["verbs"].studied == 1
        assert stats.last_study_date == review_ts

    def test_stats_are_optional(self, store, scheduler, make_card, review_ts):
        processor = ReviewProcessor(store, scheduler)

        outcome = processor.process_review(make_card(), 3, reviewed_at=review_ts)

        assert outcome.new_state == CardState.Learning

    def test_lapse_and_mastery_flags(self, processor, make_card, review_ts):
        mastered = make_card(state=CardState.Mastered, interval=30)
        review = make_card(state=CardState.Review, interval=10)

        lapse = processor.process_review(mastered, 1, reviewed_at=review_ts)
        promotion = processor.process_review(review, 5, reviewed_at=review_ts)

        assert lapse.lapsed
        assert not lapse.correct
        assert promotion.newly_mastered

    def test_default_timestamp(self, processor, make_card):
        mock_now = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        with patch("vocasrs.review_processor.utc_now", return_value=mock_now):
            outcome = processor.process_review(make_card(), 3)

        assert outcome.reviewed_at == mock_now
        assert outcome.card.updated_at == mock_now

    def test_invalid_quality_saves_nothing(self, processor, store, stats, make_card, review_ts):
        card = make_card()

        with pytest.raises(InvalidQualityError):
            processor.process_review(card, 7, reviewed_at=review_ts)

        assert store.get_card(card.id) is None
        assert stats.total_studied == 0

    def test_scheduler_failure_is_logged_and_reraised(self, store, make_card, review_ts, caplog):
        mock_scheduler = MagicMock(spec=SM2Scheduler)
        mock_scheduler.review_card.side_effect = RuntimeError("boom")
        processor = ReviewProcessor(store, mock_scheduler)
        card = make_card()

        with pytest.raises(RuntimeError, match="boom"):
            processor.process_review(card, 3, reviewed_at=review_ts)

        assert f"Failed to process review for card {card.id}" in caplog.text

    def test_process_review_by_id(self, processor, store, make_card, review_ts):
        card = make_card(state=CardState.Review, interval=4)
        store.save_card(card)

        outcome = processor.process_review_by_id(card.id, 3, reviewed_at=review_ts)

        assert outcome.card_id == card.id
        assert store.get_card(card.id).interval == 8

    def test_process_review_by_unknown_id(self, processor):
        with pytest.raises(CardNotFoundError, match="Card missing not found"):
            processor.process_review_by_id("missing", 3)
