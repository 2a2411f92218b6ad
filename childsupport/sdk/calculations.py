"""Child support calculation under the Georgia guidelines (O.C.G.A. § 19-6-15).

Pipeline:
1. Resolve the custodial parent and non-custodial overnights
2. Adjust each parent's gross income by their deductions
3. Combine adjusted incomes and compute each parent's pro-rata share
4. Look up the BCSO for the combined income and number of children
5. Split the BCSO and the shared expenses by share (presumptive support)
6. Apply deviations to each parent's presumptive amount
7. Net the two final amounts into a single payer and amount

Every function here is pure and total: out-of-range input degrades to a
defined result (usually 0) instead of raising.
"""

import logging
import math
from typing import List, Optional, Tuple

from .bcso import get_bcso_amount_with_fallback
from .custody import ARRANGEMENT_OVERNIGHTS, VISITATION_ARRANGEMENTS, resolve_custody
from .schemas import (
    CalculationResult,
    CustodyArrangement,
    Deductions,
    DeviationOptions,
    Expenses,
    IncomeStatus,
    Parent,
    ParentingTimeOption,
    Payer,
)

logger = logging.getLogger(__name__)

# Low-income deviation: sliding scale from 25% at $1,550 to 0% at $3,950.
# Simplified; not the official low-income worksheet table.
LOW_INCOME_MIN = 1550
LOW_INCOME_MAX = 3950
LOW_INCOME_MAX_REDUCTION = 0.25

# High-income deviation: flat 10% above the top of the table
HIGH_INCOME_THRESHOLD = 40000
HIGH_INCOME_SURCHARGE = 0.10

# Parenting time: 2% per 30 overnights beyond 73, capped at 50%
PARENTING_TIME_THRESHOLD = 73
PARENTING_TIME_BLOCK = 30
PARENTING_TIME_RATE = 0.02
PARENTING_TIME_MAX_REDUCTION = 0.5

VERY_LOW_INCOME_MAX = 800

# Differences under $1 are not worth a transfer
SETTLEMENT_TOLERANCE = 1


def adjust_income(gross: float, deductions: Deductions) -> float:
    """Gross monthly income less deductions, never below zero."""
    if not gross > 0:  # includes nan
        return 0

    adjusted = gross - deductions.self_employment_tax - deductions.preexisting_support
    return max(0, adjusted)


def calculate_pro_rata(income_a: float, income_b: float) -> Tuple[float, float]:
    """Each parent's share of combined adjusted income.

    Returns (0, 0) when there is no combined income.
    """
    total = income_a + income_b
    if math.isnan(total) or total <= 0:
        return 0, 0

    if math.isinf(total):
        # An infinite income takes the whole share; otherwise the sum overflowed
        if math.isinf(income_a) and math.isinf(income_b):
            return 0.5, 0.5
        if math.isinf(income_a) or math.isinf(income_b):
            return float(math.isinf(income_a)), float(math.isinf(income_b))
        income_a, income_b = income_a / 2, income_b / 2
        total = income_a + income_b

    return income_a / total, income_b / total


def lookup_bcso(combined_income: float, num_children: int) -> float:
    """BCSO for a combined adjusted income (see bcso.get_bcso_amount)."""
    return get_bcso_amount_with_fallback(combined_income, num_children).amount


def allocate_expenses(total_expenses: float, share_a: float, share_b: float) -> Tuple[float, float]:
    """Split shared expenses by income share. No rounding."""
    return total_expenses * share_a, total_expenses * share_b


def apply_adjustments(base: float, expenses: Expenses) -> float:
    """Add health insurance and child care to a combined base amount."""
    return base + expenses.health_insurance + expenses.child_care


def classify_income(combined_income: float) -> IncomeStatus:
    """Which income-based deviations apply to a combined adjusted income."""
    return IncomeStatus(
        low_income=LOW_INCOME_MIN <= combined_income <= LOW_INCOME_MAX,
        high_income=combined_income > HIGH_INCOME_THRESHOLD,
        very_low_income=0 < combined_income < VERY_LOW_INCOME_MAX,
        no_adjustments=(
            VERY_LOW_INCOME_MAX <= combined_income < LOW_INCOME_MIN
            or LOW_INCOME_MAX < combined_income <= HIGH_INCOME_THRESHOLD
        ),
    )


def apply_deviations(base: float, options: DeviationOptions, combined_income: float) -> float:
    """Apply deviations to a presumptive amount.

    Each step multiplies the already-adjusted amount, in this order:
    low income, high income, parenting time, other. The result is never
    negative.
    """
    amount = base

    if options.low_income and LOW_INCOME_MIN <= combined_income <= LOW_INCOME_MAX:
        reduction = ((LOW_INCOME_MAX - combined_income) / (LOW_INCOME_MAX - LOW_INCOME_MIN)) * LOW_INCOME_MAX_REDUCTION
        reduction = max(0, min(LOW_INCOME_MAX_REDUCTION, reduction))
        amount *= 1 - reduction
        logger.debug(f"low-income deviation: -{reduction:.2%}")

    if options.high_income and combined_income > HIGH_INCOME_THRESHOLD:
        amount *= 1 + HIGH_INCOME_SURCHARGE
        logger.debug(f"high-income deviation: +{HIGH_INCOME_SURCHARGE:.0%}")

    overnights = options.parenting_time
    if overnights > PARENTING_TIME_THRESHOLD:
        reduction = min(
            PARENTING_TIME_MAX_REDUCTION,
            ((overnights - PARENTING_TIME_THRESHOLD) / PARENTING_TIME_BLOCK) * PARENTING_TIME_RATE,
        )
        amount *= 1 - reduction
        logger.debug(f"parenting-time deviation ({overnights} overnights): -{reduction:.2%}")

    if options.other_deviations != 0:
        amount = amount * (100 + options.other_deviations) / 100
        logger.debug(f"other deviation: {options.other_deviations:+}%")

    return max(0, amount)


def _settle(final_a: float, final_b: float) -> Tuple[Payer, float]:
    """Net the two final obligations into one payer and amount.

    The parent whose final figure is lower pays the difference.
    """
    difference = final_a - final_b

    if abs(difference) < SETTLEMENT_TOLERANCE:
        return Payer.NONE, 0
    if difference > 0:
        return Payer.B, difference
    return Payer.A, abs(difference)


def calculate_child_support(
    income_a: float,
    income_b: float,
    deductions_a: Deductions,
    deductions_b: Deductions,
    num_children: int,
    expenses: Expenses,
    deviations: DeviationOptions,
    custody_a: CustodyArrangement = CustodyArrangement.CUSTODIAL,
    custody_b: CustodyArrangement = CustodyArrangement.NO_VISITATION,
    custom_overnights_a: int = 0,
    custom_overnights_b: int = 0,
    parent_a_name: Optional[str] = None,
    parent_b_name: Optional[str] = None,
) -> CalculationResult:
    """Run the full guideline calculation.

    Args:
        income_a: Parent A's gross monthly income
        income_b: Parent B's gross monthly income
        deductions_a: Parent A's deductions
        deductions_b: Parent B's deductions
        num_children: Number of children (1-6; anything else yields a 0 BCSO)
        expenses: Shared health insurance and child care
        deviations: Deviation options; parenting_time is replaced by the
            overnights resolved from the custody arrangements
        custody_a: Parent A's custody arrangement
        custody_b: Parent B's custody arrangement
        custom_overnights_a: Overnights when custody_a is 'custom'
        custom_overnights_b: Overnights when custody_b is 'custom'
        parent_a_name: Display name, passed through
        parent_b_name: Display name, passed through

    Returns:
        CalculationResult with every intermediate value
    """
    custody = resolve_custody(custody_a, custody_b, custom_overnights_a, custom_overnights_b)
    options = deviations.model_copy(update={"parenting_time": custody.overnights})

    adjusted_a = adjust_income(income_a, deductions_a)
    adjusted_b = adjust_income(income_b, deductions_b)
    combined = adjusted_a + adjusted_b

    share_a, share_b = calculate_pro_rata(adjusted_a, adjusted_b)

    lookup = get_bcso_amount_with_fallback(combined, num_children)
    bcso = lookup.amount
    logger.debug(
        f"combined income {combined:.2f} (rounded {lookup.rounded_income}), "
        f"{num_children} children -> BCSO {bcso:.2f}"
    )

    basic_a = bcso * share_a
    basic_b = bcso * share_b

    expenses_a, expenses_b = allocate_expenses(expenses.total, share_a, share_b)

    presumptive_a = basic_a + expenses_a
    presumptive_b = basic_b + expenses_b

    final_a = apply_deviations(presumptive_a, options, combined)
    final_b = apply_deviations(presumptive_b, options, combined)

    payer, amount = _settle(final_a, final_b)
    logger.debug(f"final A={final_a:.2f} B={final_b:.2f} -> payer {payer.value}, {amount:.2f}")

    return CalculationResult(
        parent_a_name=parent_a_name,
        parent_b_name=parent_b_name,
        gross_income_a=income_a,
        gross_income_b=income_b,
        adjusted_income_a=adjusted_a,
        adjusted_income_b=adjusted_b,
        combined_income=combined,
        pro_rata_a=share_a,
        pro_rata_b=share_b,
        bcso=bcso,
        basic_support_a=basic_a,
        basic_support_b=basic_b,
        expenses_a=expenses_a,
        expenses_b=expenses_b,
        presumptive_support_a=presumptive_a,
        presumptive_support_b=presumptive_b,
        final_support_a=final_a,
        final_support_b=final_b,
        payer=payer,
        amount=amount,
        custodial_parent=custody.custodial_parent,
        parenting_time_overnights=custody.overnights,
        custody_ambiguous=custody.ambiguous,
        used_minimum_bracket=lookup.used_minimum_bracket,
    )


def compare_parenting_time(
    income_a: float,
    income_b: float,
    deductions_a: Deductions,
    deductions_b: Deductions,
    num_children: int,
    expenses: Expenses,
    deviations: DeviationOptions,
    custody_a: CustodyArrangement = CustodyArrangement.CUSTODIAL,
    custody_b: CustodyArrangement = CustodyArrangement.NO_VISITATION,
    custom_overnights_a: int = 0,
    custom_overnights_b: int = 0,
) -> List[ParentingTimeOption]:
    """Recalculate with the non-custodial parent on each visitation arrangement.

    The custodial parent stays as resolved from the given arrangements. A
    custom current arrangement is included as its own row.
    """
    custody = resolve_custody(custody_a, custody_b, custom_overnights_a, custom_overnights_b)

    if custody.custodial_parent == Parent.A:
        current = CustodyArrangement(custody_b)
    else:
        current = CustodyArrangement(custody_a)

    candidates = [(arrangement, ARRANGEMENT_OVERNIGHTS[arrangement]) for arrangement in VISITATION_ARRANGEMENTS]
    if current not in VISITATION_ARRANGEMENTS:
        candidates.append((current, custody.overnights))
        candidates.sort(key=lambda c: c[1])

    options = []
    for arrangement, overnights in candidates:
        if custody.custodial_parent == Parent.A:
            arrangements = (CustodyArrangement.CUSTODIAL, arrangement, 0, overnights)
        else:
            arrangements = (arrangement, CustodyArrangement.CUSTODIAL, overnights, 0)

        result = calculate_child_support(
            income_a, income_b, deductions_a, deductions_b,
            num_children, expenses, deviations,
            *arrangements,
        )
        options.append(ParentingTimeOption(
            arrangement=arrangement,
            overnights=result.parenting_time_overnights,
            payer=result.payer,
            amount=result.amount,
            current=arrangement == current,
        ))

    return options
