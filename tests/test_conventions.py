from __future__ import annotations

from datetime import date, datetime

import pytest

from ficcurve import EvaluationContext, SimpleQuote
from ficcurve.conventions import (
    ACT_360,
    NULL_CALENDAR,
    TARGET,
    THIRTY_360E,
    BusinessDayAdjustment,
    Frequency,
    get_calendar,
    get_day_count_convention,
    parse_tenor,
)
from ficcurve.schedule import (
    add_months,
    generate_schedule,
    is_imm_date,
    next_imm_date,
    third_wednesday,
)
from ficcurve.schema import MarketQuote, as_quote


# ----------------------------------------------------------------------
# Day counts and calendars
# ----------------------------------------------------------------------
def test_day_count_lookup_and_fractions():
    assert get_day_count_convention("actual/360") is ACT_360
    assert get_day_count_convention(ACT_360) is ACT_360
    assert ACT_360.day_count(date(2024, 1, 2), date(2024, 7, 2)) == 182
    assert ACT_360.year_fraction(date(2024, 1, 2), date(2024, 7, 2)) == pytest.approx(
        182 / 360
    )
    assert THIRTY_360E.day_count(date(2024, 1, 31), date(2024, 3, 31)) == 60
    with pytest.raises(ValueError, match="Unknown day count convention"):
        get_day_count_convention("BUS/252")


def test_target_holidays():
    assert not TARGET.is_business_day(date(2024, 3, 29))
    assert not TARGET.is_business_day(date(2024, 5, 1))
    assert not TARGET.is_business_day(date(2024, 12, 25))
    assert not TARGET.is_business_day(date(2024, 1, 6))
    assert TARGET.is_business_day(date(2024, 1, 2))
    assert NULL_CALENDAR.is_business_day(date(2024, 1, 6))


def test_business_day_arithmetic():
    assert TARGET.add_business_days(date(2023, 12, 29), 1) == date(2024, 1, 2)
    assert TARGET.add_business_days(datetime(2024, 1, 2, 9, 30), 2) == date(2024, 1, 4)
    assert TARGET.business_days_between(date(2024, 1, 2), date(2024, 1, 5)) == 3
    assert TARGET.adjust(date(2024, 1, 6)) == date(2024, 1, 8)
    assert TARGET.adjust(date(2024, 3, 30), BusinessDayAdjustment.MODIFIED_FOLLOWING) == date(
        2024, 3, 28
    )
    assert TARGET.advance(
        date(2024, 1, 31), "1M", BusinessDayAdjustment.MODIFIED_FOLLOWING
    ) == date(2024, 2, 29)


def test_calendar_lookup():
    assert get_calendar("eur") is TARGET
    assert get_calendar(TARGET) is TARGET
    with pytest.raises(ValueError, match="Unknown calendar"):
        get_calendar("NYSE")


@pytest.mark.parametrize("tenor", ["3X", "M", "", "1.5Y"])
def test_parse_tenor_rejects_malformed(tenor):
    with pytest.raises(ValueError, match="Unsupported tenor"):
        parse_tenor(tenor)


# ----------------------------------------------------------------------
# Schedules and IMM dates
# ----------------------------------------------------------------------
def test_schedule_merges_short_final_stub():
    dates = generate_schedule(
        date(2024, 1, 15), date(2024, 7, 18), Frequency.QUARTERLY, NULL_CALENDAR
    )
    assert dates == [date(2024, 1, 15), date(2024, 4, 15), date(2024, 7, 18)]


def test_schedule_adjusts_onto_business_days():
    dates = generate_schedule(
        date(2024, 1, 4), date(2026, 1, 4), Frequency.ANNUAL, TARGET
    )
    assert dates == [date(2024, 1, 4), date(2025, 1, 6), date(2026, 1, 5)]

    with pytest.raises(ValueError, match="before maturity"):
        generate_schedule(date(2024, 1, 4), date(2024, 1, 4), Frequency.ANNUAL, TARGET)


def test_add_months_end_of_month():
    assert add_months(date(2024, 2, 29), 1) == date(2024, 3, 29)
    assert add_months(date(2024, 2, 29), 1, end_of_month=True) == date(2024, 3, 31)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_imm_dates():
    assert third_wednesday(2024, 3) == date(2024, 3, 20)
    assert is_imm_date(date(2024, 3, 20))
    assert not is_imm_date(date(2024, 3, 21))
    assert not is_imm_date(date(2024, 4, 17))
    assert next_imm_date(date(2024, 1, 2)) == date(2024, 3, 20)
    assert next_imm_date(date(2024, 3, 20)) == date(2024, 6, 19)
    assert next_imm_date(date(2024, 3, 20), include_today=True) == date(2024, 3, 20)
    assert next_imm_date(date(2024, 12, 19)) == date(2025, 3, 19)


# ----------------------------------------------------------------------
# Quotes and the evaluation context
# ----------------------------------------------------------------------
def test_simple_quote_notifies_only_on_change():
    quote = SimpleQuote(0.03)
    calls = []
    quote.register_with(lambda: calls.append(1))

    assert quote.set_value(0.03) == 0.0
    assert calls == []
    assert quote.set_value(0.035) == pytest.approx(0.005)
    assert calls == [1]

    quote.reset()
    assert not quote.is_valid()
    with pytest.raises(ValueError, match="no value set"):
        quote.value()


def test_as_quote_and_market_quote():
    quote = SimpleQuote(1.0)
    assert as_quote(quote) is quote
    assert as_quote(0.02).value() == 0.02

    assert MarketQuote("3M", 3.91, None).decimal_rate == pytest.approx(0.0391)
    assert MarketQuote("3M", 0.0391, None).decimal_rate == 0.0391


def test_evaluation_context_notifies_on_move():
    context = EvaluationContext(datetime(2024, 1, 2, 17, 0))
    calls = []
    context.register_with(lambda: calls.append(1))

    assert context.as_of == date(2024, 1, 2)
    context.set_as_of(date(2024, 1, 2))
    assert calls == []
    context.set_as_of(date(2024, 1, 3))
    assert calls == [1]
    assert context.as_of == date(2024, 1, 3)
