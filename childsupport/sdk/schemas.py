"""Pydantic schemas for the child support calculation.

These models carry every input and output of one calculation. All of them
are immutable; a calculation builds fresh instances and never mutates them.
The bracket table schemas validate data/bcso_*.yaml the same way the rest
of the SDK validates static rules data.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MIN_CHILDREN = 1
MAX_CHILDREN = 6
MAX_OVERNIGHTS = 365


class CustodyArrangement(str, Enum):
    """How much annual overnight time a parent has with the children."""

    CUSTODIAL = "custodial"
    NO_VISITATION = "no-visitation"
    MINIMAL = "minimal"
    STANDARD = "standard"
    EXTENDED = "extended"
    SHARED = "shared"
    CUSTOM = "custom"


class Parent(str, Enum):
    """Parent identifier."""

    A = "A"
    B = "B"


class Payer(str, Enum):
    """Which parent pays the net obligation, if either."""

    A = "A"
    B = "B"
    NONE = "None"


# =============================================================================
# Bracket table
# =============================================================================


class BracketEntry(BaseModel):
    """Single BCSO table row."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    income: int = Field(..., ge=0, description="Combined adjusted monthly income (multiple of 50)")
    amounts: Dict[int, float] = Field(..., description="Monthly obligation by number of children (1-6)")

    @field_validator("income")
    @classmethod
    def income_multiple_of_50(cls, v: int) -> int:
        if v % 50 != 0:
            raise ValueError(f"bracket income must be a multiple of 50, got {v}")
        return v

    @field_validator("amounts")
    @classmethod
    def amounts_cover_all_children(cls, v: Dict[int, float]) -> Dict[int, float]:
        expected = set(range(MIN_CHILDREN, MAX_CHILDREN + 1))
        if set(v) != expected:
            raise ValueError(f"amounts must have keys {sorted(expected)}, got {sorted(v)}")
        negative = [k for k, amount in v.items() if amount < 0]
        if negative:
            raise ValueError(f"amounts must be non-negative (children: {negative})")
        return v

    def amount_for(self, num_children: int) -> float:
        """Obligation for a child count, 0 when the count is out of range."""
        return self.amounts.get(num_children, 0)


class BcsoTable(BaseModel):
    """Complete BCSO table for one jurisdiction and year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    jurisdiction: str
    source: Optional[str] = None
    minimum_income: int = Field(..., ge=0)
    maximum_income: int = Field(..., gt=0)
    brackets: List[BracketEntry]

    @model_validator(mode="after")
    def check_brackets(self) -> "BcsoTable":
        incomes = [b.income for b in self.brackets]
        for prev, cur in zip(incomes, incomes[1:]):
            if cur <= prev:
                raise ValueError(f"bracket incomes must be strictly increasing ({prev} then {cur})")
        if incomes and incomes[0] > self.minimum_income:
            raise ValueError(
                f"lowest bracket {incomes[0]} is above the minimum income {self.minimum_income}"
            )
        if incomes and incomes[-1] < self.maximum_income:
            raise ValueError(
                f"highest bracket {incomes[-1]} is below the maximum income {self.maximum_income}"
            )
        return self


class BcsoLookup(BaseModel):
    """BCSO amount plus how it was resolved."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: float = Field(..., ge=0)
    rounded_income: Optional[int] = Field(None, description="Income rounded to $50, None for non-finite input")
    bracket_income: Optional[int] = Field(None, description="Income of the bracket used, None if no bracket")
    used_minimum_bracket: bool = Field(False, description="True when income fell below the table floor")


# =============================================================================
# Calculation inputs
# =============================================================================


class Deductions(BaseModel):
    """Per-parent deductions from gross income."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    self_employment_tax: float = Field(0, ge=0, allow_inf_nan=False)
    preexisting_support: float = Field(0, ge=0, allow_inf_nan=False)


class Expenses(BaseModel):
    """Shared child-related expenses, prorated by income share."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    health_insurance: float = Field(0, ge=0, allow_inf_nan=False)
    child_care: float = Field(0, ge=0, allow_inf_nan=False)

    @property
    def total(self) -> float:
        return self.health_insurance + self.child_care


class DeviationOptions(BaseModel):
    """Deviations applied to each parent's presumptive amount.

    parenting_time is the effective annual overnights of the non-custodial
    parent. calculate_child_support() fills it in from the custody
    arrangements, so callers normally leave it at 0.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    low_income: bool = False
    high_income: bool = False
    parenting_time: int = Field(0, ge=0, description="Effective annual overnights")
    other_deviations: float = Field(0, description="Percentage adjustment, e.g. 10 for +10%")


class CustodyResolution(BaseModel):
    """Custodial parent and the overnights used for the parenting-time deviation."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    custodial_parent: Parent
    overnights: int = Field(..., ge=0, le=MAX_OVERNIGHTS)
    ambiguous: bool = Field(False, description="Neither or both parents marked custodial")

    @property
    def non_custodial_parent(self) -> Parent:
        return Parent.B if self.custodial_parent == Parent.A else Parent.A


class IncomeStatus(BaseModel):
    """Which income-based deviations a combined income qualifies for."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    low_income: bool
    high_income: bool
    very_low_income: bool
    no_adjustments: bool


# =============================================================================
# Calculation output
# =============================================================================


class CalculationResult(BaseModel):
    """Full breakdown of one child support calculation."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    parent_a_name: Optional[str] = None
    parent_b_name: Optional[str] = None
    gross_income_a: float
    gross_income_b: float
    adjusted_income_a: float = Field(..., ge=0)
    adjusted_income_b: float = Field(..., ge=0)
    combined_income: float = Field(..., ge=0)
    pro_rata_a: float = Field(..., ge=0, le=1)
    pro_rata_b: float = Field(..., ge=0, le=1)
    bcso: float = Field(..., ge=0, description="Basic child support obligation from the table")
    basic_support_a: float
    basic_support_b: float
    expenses_a: float
    expenses_b: float
    presumptive_support_a: float
    presumptive_support_b: float
    final_support_a: float = Field(..., ge=0)
    final_support_b: float = Field(..., ge=0)
    payer: Payer
    amount: float = Field(..., ge=0)

    # Audit details
    custodial_parent: Parent = Parent.A
    parenting_time_overnights: int = 0
    custody_ambiguous: bool = False
    used_minimum_bracket: bool = False

    def name_of(self, parent: Parent) -> str:
        """Display name for a parent, falling back to 'Parent A'/'Parent B'."""
        name = self.parent_a_name if parent == Parent.A else self.parent_b_name
        return name or f"Parent {parent.value}"


class ParentingTimeOption(BaseModel):
    """Outcome of one visitation arrangement in a parenting-time comparison."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    arrangement: CustodyArrangement
    overnights: int
    payer: Payer
    amount: float = Field(..., ge=0)
    current: bool = False
