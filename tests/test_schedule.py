from datetime import datetime, timezone

import pytest

from models.recurring import ACTIVE, COMPLETED, PAUSED, RecurringDonation
from services import schedule
from utils.errors import InvalidInput

UTC = timezone.utc
JAN_31 = datetime(2026, 1, 31, 9, 0, tzinfo=UTC)


def _series(**overrides):
    fields = dict(
        id=7, user_id=111, amount=500.0, payment_method="upi",
        frequency="monthly", next_run=JAN_31,
    )
    fields.update(overrides)
    return RecurringDonation(**fields)


def test_confirm_advances_schedule():
    updated = schedule.confirm_occurrence(_series())
    assert updated.status == ACTIVE
    assert updated.total_occurrences == 2
    assert updated.next_run == datetime(2026, 2, 28, 9, 0, tzinfo=UTC)


def test_confirm_returns_new_record():
    original = _series()
    schedule.confirm_occurrence(original)
    assert original.total_occurrences == 1
    assert original.next_run == JAN_31


def test_occurrence_cap_completes_series():
    updated = schedule.confirm_occurrence(_series(max_occurrences=2))
    assert updated.status == COMPLETED
    assert updated.next_run is None
    assert updated.total_occurrences == 2


def test_below_cap_stays_active():
    updated = schedule.confirm_occurrence(_series(max_occurrences=3))
    assert updated.status == ACTIVE
    assert updated.total_occurrences == 2


def test_end_date_completes_series():
    updated = schedule.confirm_occurrence(_series(end_date=datetime(2026, 2, 15, tzinfo=UTC)))
    assert updated.status == COMPLETED
    assert updated.next_run is None


def test_next_run_on_end_date_is_still_allowed():
    end = datetime(2026, 2, 28, 9, 0, tzinfo=UTC)
    updated = schedule.confirm_occurrence(_series(end_date=end))
    assert updated.status == ACTIVE
    assert updated.next_run == end


@pytest.mark.parametrize("status,next_run", [(PAUSED, None), (COMPLETED, None), (ACTIVE, None)])
def test_inactive_series_cannot_be_confirmed(status, next_run):
    with pytest.raises(InvalidInput):
        schedule.confirm_occurrence(_series(status=status, next_run=next_run))


def test_pause_clears_next_run():
    paused = schedule.pause(_series(total_occurrences=4))
    assert paused.status == PAUSED
    assert paused.next_run is None
    assert paused.total_occurrences == 4


def test_third_of_three_occurrences_completes():
    updated = schedule.confirm_occurrence(_series(max_occurrences=3, total_occurrences=2))
    assert updated.status == COMPLETED
    assert updated.next_run is None
    assert updated.total_occurrences == 3
