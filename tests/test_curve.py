from __future__ import annotations

import math
from datetime import date

import pytest

from ficcurve import (
    CurveConfigurationError,
    CurveError,
    FlatForwardCurve,
    PiecewiseYieldCurve,
    SimpleQuote,
)
from ficcurve.instruments import (
    BasisSwapRateHelper,
    DepositRateHelper,
    SwapRateHelper,
)


def test_reference_date_moves_with_context(eur_curve, context):
    assert eur_curve.reference_date == date(2024, 1, 4)
    eur_curve.discount(1.0)

    context.set_as_of(date(2024, 1, 3))

    assert not eur_curve.is_calculated
    assert eur_curve.reference_date == date(2024, 1, 5)
    assert eur_curve.dates()[0] == date(2024, 1, 5)
    assert eur_curve.discount(eur_curve.reference_date) == pytest.approx(1.0, abs=1e-15)
    for helper in eur_curve.instruments:
        assert helper.earliest_date == date(2024, 1, 5)
        assert abs(helper.quote_error()) <= 1e-10


def test_fixed_and_moving_reference_are_exclusive(context, eur_helpers):
    with pytest.raises(CurveConfigurationError, match="exclusive"):
        PiecewiseYieldCurve(eur_helpers, date(2024, 1, 4), context=context)
    with pytest.raises(CurveConfigurationError, match="required"):
        PiecewiseYieldCurve(eur_helpers)


def test_max_date_and_extrapolation(eur_curve):
    last = eur_curve.instruments[-1].pillar_date
    assert eur_curve.max_date == last

    beyond = date(last.year + 5, last.month, 1)
    with pytest.raises(ValueError, match="past max curve time"):
        eur_curve.discount(beyond)

    df_extrapolated = eur_curve.discount(beyond, extrapolate=True)
    assert 0.0 < df_extrapolated < eur_curve.discount(last)

    eur_curve.enable_extrapolation()
    assert eur_curve.discount(beyond) == df_extrapolated
    eur_curve.disable_extrapolation()
    assert not eur_curve.allows_extrapolation


def test_negative_time_rejected(eur_curve):
    with pytest.raises(ValueError, match="negative time"):
        eur_curve.discount(-0.1)


def test_node_snapshots_are_copies(eur_curve):
    data = eur_curve.data()
    data[1] = 0.5
    assert eur_curve.data()[1] != 0.5

    nodes = eur_curve.nodes()
    assert nodes[0] == (eur_curve.reference_date, 1.0)
    assert len(nodes) == len(eur_curve.instruments) + 1


def test_nodes_frame_and_report_frame(eur_curve):
    frame = eur_curve.nodes_frame()
    assert list(frame.columns) == ["date", "time", "value", "discount", "zero_rate"]
    assert frame["discount"].iloc[0] == pytest.approx(1.0)
    assert frame["discount"].is_monotonic_decreasing

    report = eur_curve.report.to_frame()
    assert len(report) == len(eur_curve.instruments)
    assert report.index.name == "index"
    assert (report["repricing_error"].abs() <= 1e-10).all()
    assert set(report["method"]) <= {"newton", "bisection", "cold retry", "joint"}


def test_dependents_notified_on_quote_change(eur_curve, market_quotes):
    calls = []
    eur_curve.register_with(lambda: calls.append(1))

    eur_curve.discount(1.0)
    market_quotes["2Y"].set_value(0.0315)
    assert calls == [1]

    # already stale: nothing more to forward
    market_quotes["2Y"].set_value(0.0316)
    assert calls == [1]


def test_frozen_curve_keeps_its_nodes(eur_curve, market_quotes):
    target = date(2027, 1, 4)
    before = eur_curve.discount(target)

    eur_curve.freeze()
    market_quotes["3Y"].set_value(0.0300)
    assert eur_curve.is_calculated
    assert eur_curve.discount(target) == before

    eur_curve.unfreeze()
    assert not eur_curve.is_calculated
    assert eur_curve.discount(target) < before


def test_freezing_before_first_calculation_is_reported(eur_curve):
    eur_curve.freeze()
    with pytest.raises(CurveError, match="frozen before its first calculation"):
        eur_curve.discount(0.1)

    eur_curve.unfreeze()
    assert eur_curve.discount(0.1) < 1.0


def test_turn_of_year_jump_with_default_date(curve_date, context, null_deposit):
    helper = DepositRateHelper(0.03, "2Y", context, null_deposit)
    plain = PiecewiseYieldCurve([helper], reference_date=curve_date)
    jumped = PiecewiseYieldCurve([helper], reference_date=curve_date, jumps=[0.999])

    maturity = helper.maturity_date
    assert jumped.discount(maturity) == pytest.approx(plain.discount(maturity), abs=1e-12)

    year_end = date(2024, 12, 31)
    after = date(2025, 1, 1)
    assert jumped.discount(year_end) > plain.discount(year_end)
    ratio = jumped.discount(after) / jumped.discount(year_end)
    plain_ratio = plain.discount(after) / plain.discount(year_end)
    assert ratio == pytest.approx(0.999 * plain_ratio, rel=1e-5)


def test_jump_quote_change_invalidates(curve_date, context, null_deposit):
    jump = SimpleQuote(0.999)
    helper = DepositRateHelper(0.03, "2Y", context, null_deposit)
    curve = PiecewiseYieldCurve(
        [helper],
        reference_date=curve_date,
        jumps=[jump],
        jump_dates=[date(2024, 6, 28)],
    )
    before = curve.discount(date(2024, 7, 1))

    jump.set_value(0.998)
    assert not curve.is_calculated
    assert curve.discount(date(2024, 7, 1)) < before
    assert abs(helper.quote_error()) <= 1e-10


def test_invalid_jumps_rejected(curve_date, context, null_deposit):
    helper = DepositRateHelper(0.03, "1Y", context, null_deposit)
    with pytest.raises(CurveConfigurationError, match="mismatch"):
        PiecewiseYieldCurve(
            [helper], reference_date=curve_date, jumps=[0.999], jump_dates=[]
        )

    curve = PiecewiseYieldCurve([helper], reference_date=curve_date, jumps=[-1.0])
    with pytest.raises(CurveConfigurationError, match="positive"):
        curve.discount(0.5)


def test_dual_curve_projection(context, market_quotes):
    ois_rate = SimpleQuote(0.035)
    ois = FlatForwardCurve(date(2024, 1, 4), ois_rate)
    helpers = [DepositRateHelper(market_quotes["6M"], "6M", context)]
    helpers += [
        SwapRateHelper(market_quotes[tenor], tenor, context, discount_curve=ois)
        for tenor in ("2Y", "5Y")
    ]
    curve = PiecewiseYieldCurve(
        helpers, context=context, settlement_days=2, calendar="TARGET"
    )
    curve.calculate()
    for helper in curve.instruments:
        assert abs(helper.quote_error()) <= 1e-10
    assert helpers[1].discount_curve is ois

    # a move of the discount curve invalidates the projection curve
    ois_rate.set_value(0.036)
    assert not curve.is_calculated
    curve.calculate()
    for helper in curve.instruments:
        assert abs(helper.quote_error()) <= 1e-10


def test_basis_swaps_strip_projection_curve(context):
    ois = FlatForwardCurve(date(2024, 1, 4), 0.03)
    euribor_3m = FlatForwardCurve(date(2024, 1, 4), 0.032)
    basis = {"1Y": 0.0010, "2Y": 0.0012, "5Y": 0.0015}
    helpers = [
        BasisSwapRateHelper(spread, tenor, context, euribor_3m, ois)
        for tenor, spread in basis.items()
    ]
    euribor_6m = PiecewiseYieldCurve(
        helpers, context=context, settlement_days=2, calendar="TARGET"
    )
    euribor_6m.calculate()

    for helper in euribor_6m.instruments:
        assert abs(helper.quote_error()) <= 1e-10
    assert euribor_6m.zero_rate(2.0) > euribor_3m.zero_rate(2.0)

    # a fresh helper on the same dates reads the quoted basis off the curve
    check = BasisSwapRateHelper(0.0, "2Y", context, euribor_3m, ois)
    check.set_term_structure(euribor_6m)
    assert check.implied_quote() == pytest.approx(0.0012, abs=1e-10)


def test_flat_forward_curve():
    rate = SimpleQuote(0.03)
    curve = FlatForwardCurve(date(2024, 1, 2), rate, day_counter="ACT/365F")

    assert curve.discount(2.0) == pytest.approx(math.exp(-0.06))
    assert curve.zero_rate(2.0) == pytest.approx(0.03)
    assert curve.forward_rate(1.0, 3.0) == pytest.approx(0.03)
    assert curve.instantaneous_forward(1.0) == pytest.approx(0.03, abs=1e-9)

    start, end = date(2024, 4, 2), date(2024, 7, 2)
    alpha = 91 / 360
    expected = (math.exp(0.03 * 91 / 365) - 1.0) / alpha
    assert curve.simple_forward_rate(start, end, "ACT/360") == pytest.approx(expected)

    calls = []
    curve.register_with(lambda: calls.append(1))
    rate.set_value(0.04)
    assert calls == [1]
    assert curve.rate == 0.04
    assert curve.discount(date(2199, 12, 31)) > 0.0
