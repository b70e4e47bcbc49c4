from datetime import datetime, timedelta, timezone

import pytest

from vocasrs.stats import StudyStats

UTC = timezone.utc


@pytest.fixture
def day_one() -> datetime:
    return datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


def test_first_review_starts_streak(day_one):
    stats = StudyStats()

    stats.record_review(True, ["g1"], day_one)

    assert stats.total_studied == 1
    assert stats.total_correct == 1
    assert stats.streak_days == 1
    assert stats.last_study_date == day_one


def test_same_day_keeps_streak(day_one):
    stats = StudyStats()
    stats.record_review(True, [], day_one)
    stats.record_review(False, [], day_one + timedelta(hours=8))

    assert stats.streak_days == 1
    assert stats.total_studied == 2
    assert stats.total_correct == 1


def test_next_day_extends_streak(day_one):
    stats = StudyStats()
    for offset in range(3):
        stats.record_review(True, [], day_one + timedelta(days=offset))

    assert stats.streak_days == 3


def test_gap_resets_streak(day_one):
    stats = StudyStats(streak_days=5, last_study_date=day_one)

    stats.record_review(True, [], day_one + timedelta(days=2))

    assert stats.streak_days == 1


def test_group_counters(day_one):
    stats = StudyStats()
    stats.record_review(True, ["verbs", "icfes"], day_one)
    stats.record_review(False, ["verbs"], day_one)

    assert stats.by_group["verbs"].studied == 2
    assert stats.by_group["verbs"].correct == 1
    assert stats.by_group["icfes"].studied == 1
    assert stats.by_group["icfes"].correct == 1


def test_accuracy(day_one):
    stats = StudyStats()
    assert stats.accuracy is None

    stats.record_review(True, [], day_one)
    stats.record_review(False, [], day_one)
    stats.record_review(True, [], day_one)
    stats.record_review(True, [], day_one)

    assert stats.accuracy == pytest.approx(75.0)
