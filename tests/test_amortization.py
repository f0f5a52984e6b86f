"""Tests for the loan amortization engine."""

import math

import pytest

from components.core.exceptions import InvalidArgumentError
from components.loan import amortization
from components.loan.amortization import (
    FULLY_PAID_TOLERANCE,
    ScheduleEntry,
    build_schedule,
    compute_monthly_payment,
    is_fully_paid,
    iter_schedule,
    remaining_balance,
    summarize_loan,
)

LOAN_CASES = [
    (120000, 10, 12),
    (1000, 5.5, 1),
    (250000, 7.25, 360),
    (5000, 24, 18),
    (999.99, 0.5, 60),
]


class TestMonthlyPayment:
    """Tests for compute_monthly_payment."""

    def test_reference_loan(self) -> None:
        """120000 at 10% over 12 months."""
        payment = compute_monthly_payment(120000, 10, 12)

        assert payment == pytest.approx(10549.91, abs=0.01)
        assert payment * 12 == pytest.approx(126598.88, abs=0.01)

    def test_full_precision_is_kept(self) -> None:
        payment = compute_monthly_payment(120000, 10, 12)
        assert payment != round(payment, 2)

    def test_single_month_repays_principal_plus_one_month_interest(self) -> None:
        payment = compute_monthly_payment(1200, 12, 1)
        assert payment == pytest.approx(1212.0)

    def test_near_zero_rate_approaches_linear_split(self) -> None:
        payment = compute_monthly_payment(1000, 0.0001, 6)

        assert not math.isnan(payment)
        assert round(payment, 2) == 166.67
        assert payment > 1000 / 6

    def test_vanishing_rate_does_not_divide_by_zero(self) -> None:
        payment = compute_monthly_payment(1000, 1e-300, 6)
        assert payment == pytest.approx(1000 / 6)

    def test_higher_rate_means_higher_payment(self) -> None:
        assert compute_monthly_payment(10000, 12, 24) > compute_monthly_payment(10000, 6, 24)

    @pytest.mark.parametrize(
        "principal, rate, months",
        [
            (0, 10, 12),
            (-100, 10, 12),
            (1000, 0, 12),
            (1000, -1, 12),
            (1000, 10, 0),
            (1000, 10, -3),
            (1000, 10, 2.5),
            (float("nan"), 10, 12),
            (1000, float("inf"), 12),
            ("1000", 10, 12),
            (True, 10, 12),
            (1000, 10, True),
        ],
    )
    def test_invalid_arguments(self, principal, rate, months) -> None:
        with pytest.raises(InvalidArgumentError):
            compute_monthly_payment(principal, rate, months)

    def test_invalid_argument_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="greater than 0"):
            compute_monthly_payment(1000, 10, 0)


class TestSchedule:
    """Tests for build_schedule and iter_schedule."""

    def test_reference_first_month(self) -> None:
        schedule = build_schedule(120000, 10, 12)

        assert len(schedule) == 12
        first = schedule[0]
        assert first.month == 1
        assert first.interest == pytest.approx(1000.00, abs=0.01)
        assert first.principal == pytest.approx(9549.91, abs=0.01)
        assert first.balance == pytest.approx(110450.09, abs=0.01)
        assert first.payment == pytest.approx(10549.91, abs=0.01)

    @pytest.mark.parametrize("principal, rate, months", LOAN_CASES)
    def test_schedule_properties(self, principal, rate, months) -> None:
        schedule = build_schedule(principal, rate, months)
        payment = compute_monthly_payment(principal, rate, months)

        assert len(schedule) == months
        assert [entry.month for entry in schedule] == list(range(1, months + 1))
        assert all(entry.balance >= 0 for entry in schedule)
        assert schedule[-1].balance <= FULLY_PAID_TOLERANCE

        tolerance = 0.01 * months
        assert sum(e.principal for e in schedule) == pytest.approx(principal, abs=tolerance)
        assert sum(e.payment for e in schedule) == pytest.approx(payment * months, abs=tolerance)
        assert sum(e.principal + e.interest for e in schedule) == pytest.approx(
            payment * months, abs=tolerance
        )

    def test_balances_decrease(self) -> None:
        balances = [entry.balance for entry in build_schedule(5000, 24, 18)]
        assert balances == sorted(balances, reverse=True)

    def test_interest_share_shrinks_over_time(self) -> None:
        schedule = build_schedule(250000, 7.25, 360)
        assert schedule[0].interest > schedule[-1].interest
        assert schedule[0].principal < schedule[-1].principal

    def test_entries_are_rounded_to_cents(self) -> None:
        for entry in build_schedule(999.99, 0.5, 60):
            for value in (entry.payment, entry.principal, entry.interest, entry.balance):
                assert round(value, 2) == value

    def test_idempotent(self) -> None:
        assert build_schedule(120000, 10, 12) == build_schedule(120000, 10, 12)

    def test_iter_schedule_is_single_pass(self) -> None:
        entries = iter_schedule(1000, 5, 3)

        assert len(list(entries)) == 3
        assert list(entries) == []

    def test_iter_schedule_yields_entries(self) -> None:
        first = next(iter_schedule(1000, 5, 3))
        assert isinstance(first, ScheduleEntry)

    def test_invalid_arguments(self) -> None:
        with pytest.raises(InvalidArgumentError):
            build_schedule(1000, 10, 0)

    def test_near_zero_rate_schedule(self) -> None:
        schedule = build_schedule(1000, 0.0001, 6)

        assert all(not math.isnan(entry.balance) for entry in schedule)
        assert schedule[-1].balance == 0
        assert all(entry.payment == 166.67 for entry in schedule)


class TestRemainingBalance:
    """Tests for remaining_balance and is_fully_paid."""

    def test_nothing_paid_equals_total_repayment(self) -> None:
        remaining = remaining_balance(120000, 10, 12, 0)
        assert remaining == pytest.approx(compute_monthly_payment(120000, 10, 12) * 12)
        assert remaining == pytest.approx(amortization.total_repayment(120000, 10, 12))

    def test_monotonically_non_increasing(self) -> None:
        paid_steps = [0, 1, 100, 5000.5, 60000, 126598.88, 130000]
        remaining = [remaining_balance(120000, 10, 12, paid) for paid in paid_steps]
        assert remaining == sorted(remaining, reverse=True)

    def test_partial_payment(self) -> None:
        total = remaining_balance(1000, 12, 10, 0)
        assert remaining_balance(1000, 12, 10, 250) == pytest.approx(total - 250)

    def test_paying_exact_rounded_total_is_fully_paid(self) -> None:
        total = remaining_balance(120000, 10, 12, 0)
        remaining = remaining_balance(120000, 10, 12, round(total, 2))

        assert abs(remaining) <= FULLY_PAID_TOLERANCE
        assert is_fully_paid(remaining)

    def test_negative_total_paid_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            remaining_balance(1000, 10, 12, -1)

    def test_invalid_loan_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            remaining_balance(0, 10, 12, 0)

    @pytest.mark.parametrize(
        "remaining, expected",
        [(0.0, True), (0.01, True), (-0.004, True), (0.011, False), (500.0, False)],
    )
    def test_is_fully_paid(self, remaining, expected) -> None:
        assert is_fully_paid(remaining) is expected


class TestSummarizeLoan:
    """Tests for summarize_loan."""

    def test_reference_loan(self) -> None:
        terms = summarize_loan(120000, 10, 12)

        assert terms.monthly_payment == pytest.approx(10549.91, abs=0.01)
        assert terms.total_repayment == pytest.approx(126598.88, abs=0.01)
        assert terms.total_interest == pytest.approx(6598.88, abs=0.01)

    def test_total_interest_matches_schedule(self) -> None:
        terms = summarize_loan(5000, 24, 18)
        schedule_interest = sum(entry.interest for entry in build_schedule(5000, 24, 18))
        assert terms.total_interest == pytest.approx(schedule_interest, abs=0.1)

    def test_invalid_arguments(self) -> None:
        with pytest.raises(InvalidArgumentError):
            summarize_loan(1000, 0, 12)
