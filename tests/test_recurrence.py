from datetime import date, datetime, timedelta, timezone

import pytest

from dashboard.recurrence import (LeapDayPolicy, TimeLeft, age_at, anniversary_in,
                                  is_anniversary, next_occurrence, time_remaining)


class TestNextOccurrence:

    def test_later_this_year(self):
        assert next_occurrence(date(2010, 8, 15), date(2024, 3, 1)) == date(2024, 8, 15)

    def test_already_passed_moves_to_next_year(self):
        assert next_occurrence(date(2010, 1, 5), date(2024, 3, 1)) == date(2025, 1, 5)

    def test_reference_day_itself_counts(self):
        assert next_occurrence(date(2010, 3, 1), date(2024, 3, 1)) == date(2024, 3, 1)

    def test_accepts_datetimes(self):
        anchor = datetime(2010, 3, 1, tzinfo=timezone.utc)
        reference = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)
        assert next_occurrence(anchor, reference) == date(2024, 3, 1)

    @pytest.mark.parametrize('anchor', [date(1990, 1, 1), date(2004, 2, 29),
                                        date(2011, 12, 31), date(2015, 6, 30)])
    def test_never_before_reference_and_within_a_year(self, anchor):
        reference = date(2023, 7, 1)
        result = next_occurrence(anchor, reference)
        assert reference <= result < reference + timedelta(days=366)
        assert (result.month, result.day) == (anchor.month, anchor.day) or anchor.day == 29

    @pytest.mark.parametrize('anchor', [date(1990, 1, 1), date(2004, 2, 29), date(2000, 2, 29),
                                        date(2011, 12, 31), date(2015, 7, 1)])
    @pytest.mark.parametrize('reference', [date(2023, 3, 1), date(2023, 7, 1), date(2024, 2, 29)])
    @pytest.mark.parametrize('policy', [LeapDayPolicy.FEB_28, LeapDayPolicy.MAR_1])
    def test_moves_one_year_when_same_year_date_has_passed(self, anchor, reference, policy):
        result = next_occurrence(anchor, reference, policy)
        same_year = anniversary_in(anchor, reference.year, policy)
        if same_year < reference:
            assert result == anniversary_in(anchor, reference.year + 1, policy)
        else:
            assert result == same_year


class TestLeapDay:

    def test_leap_year_keeps_feb_29(self):
        assert next_occurrence(date(2004, 2, 29), date(2024, 1, 1)) == date(2024, 2, 29)

    def test_feb_28_policy(self):
        assert next_occurrence(date(2004, 2, 29), date(2023, 1, 1),
                               LeapDayPolicy.FEB_28) == date(2023, 2, 28)

    def test_mar_1_policy(self):
        assert next_occurrence(date(2004, 2, 29), date(2023, 1, 1),
                               LeapDayPolicy.MAR_1) == date(2023, 3, 1)

    def test_next_leap_year_policy_skips_ahead(self):
        assert next_occurrence(date(2004, 2, 29), date(2025, 3, 1),
                               LeapDayPolicy.NEXT_LEAP_YEAR) == date(2028, 2, 29)

    @pytest.mark.parametrize('policy, expected, age_then, age_now', [
        (LeapDayPolicy.FEB_28, date(2024, 2, 29), 24, 23),
        (LeapDayPolicy.MAR_1, date(2023, 3, 1), 23, 23),
        (LeapDayPolicy.NEXT_LEAP_YEAR, date(2024, 2, 29), 24, 23),
    ])
    def test_common_year_rolling_into_leap_year(self, policy, expected, age_then, age_now):
        anchor = date(2000, 2, 29)
        reference = date(2023, 3, 1)
        result = next_occurrence(anchor, reference, policy)
        assert result == expected
        assert age_at(anchor, result, policy) == age_then
        assert age_at(anchor, reference, policy) == age_now

    def test_next_leap_year_policy_has_no_anniversary_in_common_year(self):
        assert anniversary_in(date(2004, 2, 29), 2023, LeapDayPolicy.NEXT_LEAP_YEAR) is None

    def test_policy_from_config(self):
        assert LeapDayPolicy.from_config('MAR_1') is LeapDayPolicy.MAR_1
        with pytest.raises(ValueError):
            LeapDayPolicy.from_config('feb_30')


class TestAge:

    def test_before_and_on_anniversary(self):
        anchor = date(2000, 5, 10)
        assert age_at(anchor, date(2024, 5, 9)) == 23
        assert age_at(anchor, date(2024, 5, 10)) == 24

    def test_age_at_next_occurrence(self):
        anchor = date(2000, 5, 10)
        reference = date(2024, 3, 1)
        assert age_at(anchor, next_occurrence(anchor, reference)) == age_at(anchor, reference) + 1

        on_the_day = date(2024, 5, 10)
        assert age_at(anchor, next_occurrence(anchor, on_the_day)) == age_at(anchor, on_the_day)

    def test_leap_day_anchor_ages_on_substitute_day(self):
        anchor = date(2004, 2, 29)
        assert age_at(anchor, date(2023, 2, 27)) == 18
        assert age_at(anchor, date(2023, 2, 28), LeapDayPolicy.FEB_28) == 19
        assert age_at(anchor, date(2023, 2, 28), LeapDayPolicy.MAR_1) == 18
        assert age_at(anchor, date(2023, 3, 1), LeapDayPolicy.NEXT_LEAP_YEAR) == 19

    def test_is_anniversary(self):
        assert is_anniversary(date(2004, 2, 29), date(2023, 2, 28))
        assert not is_anniversary(date(2004, 2, 29), date(2023, 3, 1))
        assert is_anniversary(date(2004, 2, 29), date(2023, 3, 1), LeapDayPolicy.MAR_1)


class TestTimeRemaining:

    def test_breakdown(self):
        now = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
        target = now + timedelta(days=2, hours=3, minutes=4, seconds=5)
        assert time_remaining(target, now) == TimeLeft(days=2, hours=3, minutes=4, seconds=5)

    def test_date_target_is_start_of_day(self):
        now = datetime(2024, 3, 1, 23, 0, 0, tzinfo=timezone.utc)
        assert time_remaining(date(2024, 3, 2), now) == TimeLeft(hours=1)

    def test_later_today_is_today(self):
        now = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        result = time_remaining(date(2024, 3, 1), now)
        assert result.is_today and not result.has_passed

    def test_earlier_day_has_passed(self):
        now = datetime(2024, 3, 2, 0, 0, 1, tzinfo=timezone.utc)
        result = time_remaining(date(2024, 3, 1), now)
        assert result.has_passed and not result.is_today

    def test_to_dict(self):
        assert TimeLeft(days=1).to_dict() == {
            'days': 1, 'hours': 0, 'minutes': 0, 'seconds': 0,
            'is_today': False, 'has_passed': False,
        }

    def test_target_at_this_instant_is_today(self):
        now = datetime(2024, 3, 1, 0, 0, 0, tzinfo=timezone.utc)
        assert time_remaining(now, now) == TimeLeft(is_today=True)

    def test_target_just_before_midnight_has_passed(self):
        now = datetime(2024, 3, 2, 0, 0, 0, tzinfo=timezone.utc)
        target = now - timedelta(microseconds=1)
        assert time_remaining(target, now) == TimeLeft(has_passed=True)
