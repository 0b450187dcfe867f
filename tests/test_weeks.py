from datetime import date, datetime

import pytest

from coachplan.errors import ValidationError
from coachplan.models import ActiveWeek
from coachplan.services import weeks
from coachplan.utils.dates import (
    is_current_week, next_week_start, previous_week_start, seconds_between, week_start,
)


class TestWeekHelpers:

    def test_week_start_is_monday(self):
        assert week_start(date(2026, 10, 15)) == date(2026, 10, 12)
        assert week_start(date(2026, 10, 12)) == date(2026, 10, 12)
        assert week_start(date(2026, 10, 18)) == date(2026, 10, 12)

    def test_neighbours(self):
        assert previous_week_start(date(2026, 10, 14)) == date(2026, 10, 5)
        assert next_week_start(date(2026, 10, 14)) == date(2026, 10, 19)
        assert is_current_week(date(2026, 10, 12), today=date(2026, 10, 17))
        assert not is_current_week(date(2026, 10, 19), today=date(2026, 10, 17))

    def test_seconds_between_never_negative(self):
        assert seconds_between(datetime(2026, 1, 1, 0, 1), datetime(2026, 1, 1)) == 0
        assert seconds_between(None, datetime(2026, 1, 1)) == 0


class TestActiveWeek:

    def test_defaults_to_current_week(self, athlete, trainer):
        assert weeks.get_active_week(athlete.id, trainer.id, today=date(2026, 10, 15)) == date(2026, 10, 12)

    def test_set_and_read_back(self, athlete, trainer):
        weeks.set_active_week(athlete.id, trainer.id, date(2026, 11, 2))
        assert weeks.get_active_week(athlete.id, trainer.id) == date(2026, 11, 2)
        assert weeks.get_active_week(athlete.id) == date(2026, 11, 2)

    def test_upsert_keeps_one_pointer(self, athlete, trainer):
        weeks.set_active_week(athlete.id, trainer.id, "2026-10-12")
        weeks.set_active_week(athlete.id, trainer.id, "2026-10-19")
        assert ActiveWeek.query.filter_by(client_id=athlete.id).count() == 1
        assert weeks.get_active_week(athlete.id, trainer.id) == date(2026, 10, 19)

    def test_rejects_non_monday(self, athlete, trainer):
        with pytest.raises(ValidationError):
            weeks.set_active_week(athlete.id, trainer.id, date(2026, 10, 14))
        with pytest.raises(ValidationError):
            weeks.set_active_week(athlete.id, trainer.id, "not-a-date")
        assert ActiveWeek.query.count() == 0

    def test_no_automatic_rollover(self, athlete, trainer):
        weeks.set_active_week(athlete.id, trainer.id, date(2026, 10, 5))
        assert weeks.get_active_week(athlete.id, trainer.id, today=date(2026, 10, 30)) == date(2026, 10, 5)

    def test_advance_and_rewind(self, athlete, trainer):
        weeks.set_active_week(athlete.id, trainer.id, date(2026, 10, 12))
        weeks.advance_week(athlete.id, trainer.id)
        assert weeks.get_active_week(athlete.id, trainer.id) == date(2026, 10, 19)
        weeks.advance_week(athlete.id, trainer.id, weeks=-2)
        assert weeks.get_active_week(athlete.id, trainer.id) == date(2026, 10, 5)
