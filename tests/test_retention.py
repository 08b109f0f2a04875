from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from study_engine.dates import local_now
from study_engine.retention import (
    RetentionBand,
    classify,
    display_retention,
    memory_leaks,
    next_review_at,
    retention,
    retention_curve,
    retention_report,
)
from study_engine.schema import ModuleStatus, SyllabusModule

NOW = datetime(2024, 4, 10, 12, 0)


def studied(module_id, days_ago, strength=1.0, status=ModuleStatus.COMPLETED):
    return SyllabusModule(module_id, f"Module {module_id}", status=status, last_studied_at=NOW - timedelta(days=days_ago), strength=strength)


def test_never_studied_scores_zero():
    assert retention(None, 1.0, NOW) == 0


def test_fresh_study_scores_hundred():
    assert retention(NOW, 1.0, NOW) == 100
    assert retention(NOW, 5.0, NOW) == 100


def test_retention_strictly_decreasing_and_bounded():
    scores = [retention(NOW - timedelta(days=days), 1.0, NOW) for days in (0, 0.5, 1, 2, 3, 4)]
    assert scores == [100, 61, 37, 14, 5, 2]
    assert all(0 <= score <= 100 for score in scores)
    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_higher_strength_decays_slower():
    last = NOW - timedelta(days=1)
    assert retention(last, 2.0, NOW) == 61
    assert retention(last, 2.0, NOW) > retention(last, 1.0, NOW)


def test_clock_skew_uses_absolute_elapsed_time():
    assert retention(NOW + timedelta(days=1), 1.0, NOW) == 37


def test_missing_strength_falls_back_to_default():
    last = NOW - timedelta(days=1)
    assert retention(last, 0, NOW) == retention(last, 1.0, NOW)
    assert retention(last, None, NOW) == 37


def test_naive_and_aware_datetimes_mix():
    last = datetime(2024, 4, 9, 12, 0, tzinfo=timezone.utc)
    assert retention(last, 1.0, NOW) == 37


def test_bands():
    assert classify(100) == RetentionBand.HEALTHY
    assert classify(80) == RetentionBand.HEALTHY
    assert classify(79) == RetentionBand.FADING
    assert classify(50) == RetentionBand.FADING
    assert classify(49) == RetentionBand.AT_RISK
    assert classify(0) == RetentionBand.AT_RISK


def test_display_gated_on_status():
    assert display_retention(studied("m1", 1, status=ModuleStatus.IN_PROGRESS), NOW) is None
    assert display_retention(studied("m1", 1, status=ModuleStatus.PENDING), NOW) is None
    assert display_retention(studied("m1", 1), NOW) == 37
    assert display_retention(studied("m1", 1, status=ModuleStatus.REVISED), NOW) == 37


def test_retention_report_sorted_most_urgent_first():
    modules = [
        studied("m1", 0.1),
        studied("m2", 3),
        studied("m3", 1, status=ModuleStatus.IN_PROGRESS),
        studied("m4", 1, status=ModuleStatus.REVISED),
    ]
    rows = retention_report(modules, NOW)
    assert [row.module.id for row in rows] == ["m2", "m4", "m1"]
    assert rows[0].days_since == 3.0
    assert rows[0].band == RetentionBand.AT_RISK
    assert rows[-1].band == RetentionBand.HEALTHY


def test_memory_leaks_threshold_and_limit():
    modules = [studied("m1", 0.01), studied("m2", 3), studied("m3", 2), studied("m4", 1), studied("m5", 0.5)]
    leaks = memory_leaks(modules, NOW, threshold=90, limit=3)
    assert [row.module.id for row in leaks] == ["m2", "m3", "m4"]
    assert memory_leaks(modules, NOW, threshold=10, limit=3)[0].module.id == "m2"
    assert len(memory_leaks(modules, NOW, threshold=1, limit=3)) == 0


def test_next_review_at_crosses_threshold():
    module = studied("m1", 0, strength=1.0)
    review = next_review_at(module, threshold=50)
    assert (review - module.last_studied_at).total_seconds() == pytest.approx(np.log(2) * 86_400, abs=1)
    assert retention(module.last_studied_at, 1.0, review) == 50
    assert next_review_at(SyllabusModule("m2", "Never")) is None
    with pytest.raises(ValueError):
        next_review_at(module, threshold=0)


def test_retention_curve_matches_scalar_scores():
    curve = retention_curve(1.0, [0, 1, 2, 3])
    assert curve.tolist() == [100, 37, 14, 5]
    assert retention_curve(-1, [1]).tolist() == [37]


def test_non_finite_strength_falls_back_to_default():
    last = NOW - timedelta(days=1)
    assert retention(last, float("nan"), NOW) == 37
    assert retention(last, float("inf"), NOW) == 37
    module = studied("m1", 1, strength=float("nan"))
    assert [row.retention for row in retention_report([module], NOW)] == [37]


def test_local_clock_matches_utc_timestamps():
    just_now = datetime.now(timezone.utc)
    assert retention(just_now, 1.0, local_now()) == 100
    assert retention(just_now.replace(tzinfo=None), 1.0, local_now()) == 100
