"""Unit tests for the child support calculation pipeline.

Covers income adjustment, pro-rata shares, expense allocation, the
deviation pipeline, and end-to-end calculate_child_support() scenarios.
"""

import pytest
from pydantic import ValidationError

from childsupport.sdk.calculations import (
    adjust_income,
    allocate_expenses,
    apply_adjustments,
    apply_deviations,
    calculate_child_support,
    calculate_pro_rata,
    classify_income,
    compare_parenting_time,
    lookup_bcso,
)
from childsupport.sdk.schemas import (
    CustodyArrangement,
    Deductions,
    DeviationOptions,
    Expenses,
    Parent,
    Payer,
)


NO_DEDUCTIONS = Deductions()
NO_EXPENSES = Expenses()
NO_DEVIATIONS = DeviationOptions()


def calculate(income_a, income_b, num_children=1, expenses=NO_EXPENSES, deviations=NO_DEVIATIONS, **kwargs):
    """calculate_child_support() with zero deductions."""
    return calculate_child_support(
        income_a, income_b, NO_DEDUCTIONS, NO_DEDUCTIONS,
        num_children, expenses, deviations, **kwargs,
    )


class TestAdjustIncome:
    def test_subtracts_deductions(self):
        deductions = Deductions(self_employment_tax=100, preexisting_support=200)
        assert adjust_income(1000, deductions) == 700

    def test_never_negative(self):
        deductions = Deductions(self_employment_tax=600, preexisting_support=500)
        assert adjust_income(1000, deductions) == 0

    def test_deductions_equal_to_gross(self):
        deductions = Deductions(self_employment_tax=400, preexisting_support=600)
        assert adjust_income(1000, deductions) == 0

    @pytest.mark.parametrize("gross", [0, -1, -5000])
    def test_non_positive_gross(self, gross):
        deductions = Deductions(self_employment_tax=0, preexisting_support=0)
        assert adjust_income(gross, deductions) == 0


class TestProRata:
    def test_shares(self):
        assert calculate_pro_rata(3000, 2000) == (0.6, 0.4)

    def test_equal_incomes(self):
        assert calculate_pro_rata(2500, 2500) == (0.5, 0.5)

    def test_zero_total(self):
        assert calculate_pro_rata(0, 0) == (0, 0)

    def test_one_parent_without_income(self):
        assert calculate_pro_rata(5000, 0) == (1, 0)
        assert calculate_pro_rata(0, 5000) == (0, 1)

    def test_overflowing_sum(self):
        assert calculate_pro_rata(1e308, 1e308) == (0.5, 0.5)
        assert calculate_pro_rata(1.5e308, 0.5e308) == pytest.approx((0.75, 0.25))

    def test_infinite_income(self):
        assert calculate_pro_rata(float("inf"), 2000) == (1, 0)
        assert calculate_pro_rata(float("inf"), float("inf")) == (0.5, 0.5)

    def test_nan_total(self):
        assert calculate_pro_rata(float("inf"), float("-inf")) == (0, 0)
        assert calculate_pro_rata(float("nan"), 2000) == (0, 0)


class TestExpenses:
    def test_allocate_by_share(self):
        expense_a, expense_b = allocate_expenses(500, 2 / 3, 1 / 3)
        assert expense_a == pytest.approx(333.333, abs=0.01)
        assert expense_b == pytest.approx(166.667, abs=0.01)

    def test_allocate_zero_shares(self):
        assert allocate_expenses(500, 0, 0) == (0, 0)

    def test_apply_adjustments_adds_expenses(self):
        assert apply_adjustments(1000, Expenses(health_insurance=200, child_care=300)) == 1500

    def test_apply_adjustments_zero_expenses(self):
        assert apply_adjustments(1000, NO_EXPENSES) == 1000

    def test_lookup_bcso_delegates_to_table(self):
        assert lookup_bcso(2050, 2) == 633
        assert lookup_bcso(3000, 0) == 0


class TestApplyDeviations:
    base = 1000

    def test_no_deviations(self):
        assert apply_deviations(self.base, NO_DEVIATIONS, 3000) == 1000

    def test_low_income_sliding_scale(self):
        options = DeviationOptions(low_income=True)
        # (3950 - 2000) / 2400 * 25% = 20.3125%
        assert apply_deviations(self.base, options, 2000) == pytest.approx(796.875)

    def test_low_income_bounds(self):
        options = DeviationOptions(low_income=True)
        assert apply_deviations(self.base, options, 1550) == pytest.approx(750)
        assert apply_deviations(self.base, options, 3950) == pytest.approx(1000)
        assert apply_deviations(self.base, options, 1500) == 1000
        assert apply_deviations(self.base, options, 4000) == 1000

    def test_low_income_flag_required(self):
        assert apply_deviations(self.base, NO_DEVIATIONS, 2000) == 1000

    def test_high_income_surcharge(self):
        options = DeviationOptions(high_income=True)
        assert apply_deviations(self.base, options, 45000) == pytest.approx(1100)

    def test_high_income_requires_income_above_threshold(self):
        options = DeviationOptions(high_income=True)
        assert apply_deviations(self.base, options, 40000) == 1000

    def test_parenting_time_reduction(self):
        options = DeviationOptions(parenting_time=100)
        # (100 - 73) / 30 * 2% = 1.8%
        assert apply_deviations(self.base, options, 3000) == pytest.approx(982)

    def test_parenting_time_at_threshold(self):
        options = DeviationOptions(parenting_time=73)
        assert apply_deviations(self.base, options, 3000) == 1000

    def test_parenting_time_capped_at_half(self):
        options = DeviationOptions(parenting_time=1000)
        assert apply_deviations(self.base, options, 3000) == pytest.approx(500)

    def test_other_deviation_increase(self):
        options = DeviationOptions(other_deviations=10)
        assert apply_deviations(self.base, options, 3000) == pytest.approx(1100)

    def test_other_deviation_decrease(self):
        options = DeviationOptions(other_deviations=-10)
        assert apply_deviations(self.base, options, 3000) == pytest.approx(900)

    def test_never_negative(self):
        options = DeviationOptions(other_deviations=-150)
        assert apply_deviations(self.base, options, 3000) == 0

    def test_full_reduction(self):
        options = DeviationOptions(other_deviations=-100)
        assert apply_deviations(self.base, options, 3000) == 0

    def test_steps_compound_in_order(self):
        options = DeviationOptions(low_income=True, other_deviations=10)
        assert apply_deviations(self.base, options, 2000) == pytest.approx(1000 * 0.796875 * 1.1)

    def test_all_steps(self):
        options = DeviationOptions(high_income=True, parenting_time=146, other_deviations=-20)
        expected = 1000 * 1.1 * (1 - (146 - 73) / 30 * 0.02) * 0.8
        assert apply_deviations(self.base, options, 45000) == pytest.approx(expected)

    def test_non_negative_across_ranges(self):
        for other in (-100, -50, 0, 250, 1000):
            for overnights in (0, 80, 146, 365):
                for income in (0, 1550, 2000, 3950, 45000):
                    options = DeviationOptions(
                        low_income=True, high_income=True,
                        parenting_time=overnights, other_deviations=other,
                    )
                    assert apply_deviations(self.base, options, income) >= 0


class TestClassifyIncome:
    def test_low_income(self):
        status = classify_income(2000)
        assert status.low_income and not status.high_income and not status.no_adjustments

    def test_high_income(self):
        status = classify_income(45000)
        assert status.high_income and not status.low_income

    def test_very_low_income(self):
        assert classify_income(500).very_low_income is True

    def test_no_adjustments(self):
        assert classify_income(1000).no_adjustments is True
        assert classify_income(5000).no_adjustments is True
        assert classify_income(40000).no_adjustments is True

    def test_zero_income(self):
        status = classify_income(0)
        assert not any([status.low_income, status.high_income, status.very_low_income, status.no_adjustments])


class TestCalculateChildSupport:
    """End-to-end scenarios."""

    def test_combined_income_overflow(self):
        result = calculate(1e308, 1e308, num_children=2)

        assert result.combined_income == float("inf")
        assert result.bcso == 5041
        assert result.pro_rata_a == 0.5
        assert result.payer == Payer.NONE

    def test_infinite_income(self):
        result = calculate(float("inf"), 2000, num_children=1)

        assert result.bcso == 3378
        assert result.pro_rata_a == 1
        assert result.payer == Payer.B
        assert result.amount == pytest.approx(3378)

    def test_nan_income_treated_as_zero(self):
        result = calculate(float("nan"), 2000, num_children=1)

        assert result.adjusted_income_a == 0
        assert result.pro_rata_b == 1
        assert result.payer == Payer.A

    def test_basic_two_children(self):
        result = calculate(3000, 2000, num_children=2)

        assert result.combined_income == 5000
        assert result.pro_rata_a == 0.6
        assert result.pro_rata_b == 0.4
        assert result.bcso > 0
        assert result.amount > 0

    def test_basic_two_children_values(self):
        result = calculate(3000, 2000, num_children=2)

        # 5000 resolves to the 2250 row
        assert result.bcso == 697
        assert result.basic_support_a == pytest.approx(418.2)
        assert result.basic_support_b == pytest.approx(278.8)
        assert result.payer == Payer.B
        assert result.amount == pytest.approx(139.4)

    def test_equal_incomes(self):
        result = calculate(2500, 2500, num_children=1)

        assert result.pro_rata_a == 0.5
        assert result.pro_rata_b == 0.5
        assert result.payer == Payer.NONE
        assert result.amount == 0

    def test_expenses_prorated(self):
        expenses = Expenses(health_insurance=200, child_care=300)
        result = calculate(4000, 2000, num_children=2, expenses=expenses)

        assert result.expenses_a == pytest.approx(333.33, abs=0.1)
        assert result.expenses_b == pytest.approx(166.67, abs=0.1)
        assert result.presumptive_support_a == pytest.approx(result.basic_support_a + result.expenses_a)

    def test_one_parent_without_income(self):
        result = calculate(0, 5000, num_children=1)

        assert result.pro_rata_a == 0
        assert result.pro_rata_b == 1
        assert result.payer == Payer.A
        assert result.amount > 0

    def test_high_income_deviation(self):
        result = calculate(25000, 20000, num_children=2, deviations=DeviationOptions(high_income=True))

        assert result.final_support_a > result.presumptive_support_a
        assert result.final_support_b > result.presumptive_support_b

    def test_deductions_reduce_income(self):
        result = calculate_child_support(
            3000, 2000,
            Deductions(self_employment_tax=300, preexisting_support=200), NO_DEDUCTIONS,
            2, NO_EXPENSES, NO_DEVIATIONS,
        )
        assert result.gross_income_a == 3000
        assert result.adjusted_income_a == 2500
        assert result.combined_income == 4500
        assert result.pro_rata_a == pytest.approx(2500 / 4500)

    def test_within_one_dollar_is_no_payment(self):
        result = calculate(2500.5, 2499.5, num_children=1)

        assert result.final_support_a != result.final_support_b
        assert result.payer == Payer.NONE
        assert result.amount == 0

    def test_invalid_children_gives_zero(self):
        result = calculate(3000, 2000, num_children=7)

        assert result.bcso == 0
        assert result.payer == Payer.NONE
        assert result.amount == 0

    def test_zero_incomes(self):
        result = calculate(0, 0, num_children=2)

        assert result.combined_income == 0
        assert result.pro_rata_a == 0
        assert result.pro_rata_b == 0
        assert result.payer == Payer.NONE

    def test_below_floor_uses_minimum_bracket(self):
        result = calculate(300, 200, num_children=1)

        assert result.bcso == 170
        assert result.used_minimum_bracket is True

    def test_custody_sets_overnights(self):
        result = calculate(
            3000, 2000, num_children=2,
            custody_a=CustodyArrangement.STANDARD, custody_b=CustodyArrangement.CUSTODIAL,
        )

        assert result.custodial_parent == Parent.B
        assert result.parenting_time_overnights == 80
        reduction = (80 - 73) / 30 * 0.02
        assert result.final_support_a == pytest.approx(result.presumptive_support_a * (1 - reduction))

    def test_custom_overnights(self):
        result = calculate(
            3000, 2000, num_children=2,
            custody_b=CustodyArrangement.CUSTOM, custom_overnights_b=200,
        )
        assert result.parenting_time_overnights == 200

    def test_ambiguous_custody_falls_back_to_parent_a(self):
        result = calculate(
            3000, 2000, num_children=2,
            custody_a=CustodyArrangement.CUSTODIAL, custody_b=CustodyArrangement.CUSTODIAL,
        )
        assert result.custodial_parent == Parent.A
        assert result.custody_ambiguous is True

    def test_deviations_parenting_time_replaced_by_custody(self):
        result = calculate(3000, 2000, num_children=2, deviations=DeviationOptions(parenting_time=300))

        # Default custody is Parent B with no visitation
        assert result.parenting_time_overnights == 0
        assert result.final_support_a == result.presumptive_support_a

    def test_names_pass_through(self):
        result = calculate(3000, 2000, parent_a_name="Alex", parent_b_name="Blake")

        assert result.parent_a_name == "Alex"
        assert result.parent_b_name == "Blake"
        assert result.name_of(Parent.B) == "Blake"

    def test_result_is_immutable(self):
        result = calculate(3000, 2000)
        with pytest.raises(ValidationError):
            result.amount = 0

    def test_json_shape(self):
        data = calculate(3000, 2000, num_children=2).model_dump(mode="json")

        assert data["payer"] == "B"
        assert data["pro_rata_a"] == 0.6
        assert data["custodial_parent"] == "A"


class TestCompareParentingTime:
    def test_one_row_per_arrangement(self):
        options = compare_parenting_time(
            3000, 2000, NO_DEDUCTIONS, NO_DEDUCTIONS, 2, NO_EXPENSES, NO_DEVIATIONS,
            CustodyArrangement.CUSTODIAL, CustodyArrangement.STANDARD,
        )

        assert [o.overnights for o in options] == [0, 52, 80, 110, 146]
        assert [o.current for o in options] == [False, False, True, False, False]

    def test_more_overnights_never_increases_amount(self):
        options = compare_parenting_time(
            3000, 2000, NO_DEDUCTIONS, NO_DEDUCTIONS, 2, NO_EXPENSES, NO_DEVIATIONS,
        )
        amounts = [o.amount for o in options]
        assert amounts == sorted(amounts, reverse=True)

    def test_custom_arrangement_included(self):
        options = compare_parenting_time(
            3000, 2000, NO_DEDUCTIONS, NO_DEDUCTIONS, 2, NO_EXPENSES, NO_DEVIATIONS,
            CustodyArrangement.CUSTOM, CustodyArrangement.CUSTODIAL, 100, 0,
        )

        custom = [o for o in options if o.arrangement == CustodyArrangement.CUSTOM]
        assert len(options) == 6
        assert custom[0].overnights == 100
        assert custom[0].current is True
        assert [o.overnights for o in options] == sorted(o.overnights for o in options)
