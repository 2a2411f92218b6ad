"""Scenario files: the calculator's input form as YAML or JSON.

A scenario holds everything one calculation needs, laid out the way a user
fills it in (per-parent income and custody, children, expenses,
deviations). Field constraints are enforced here, at the edge; the
calculation engine itself accepts anything.

Example scenario.yaml:

    parent_a:
      name: Alex
      gross_monthly: 4000
      custody: custodial
    parent_b:
      name: Blake
      gross_monthly: 2000
      custody: standard
    children:
      number_of_children: 2
    expenses:
      health_insurance: 200
      child_care: 300
    deviations:
      auto: true
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .calculations import adjust_income, calculate_child_support, classify_income, compare_parenting_time
from .schemas import (
    MAX_CHILDREN,
    MAX_OVERNIGHTS,
    MIN_CHILDREN,
    CalculationResult,
    CustodyArrangement,
    Deductions,
    DeviationOptions,
    Expenses,
)

logger = logging.getLogger(__name__)

MIN_OTHER_ADJUSTMENT = -100
MAX_OTHER_ADJUSTMENT = 1000

DEFAULT_CUSTODY = {
    "parent_a": CustodyArrangement.CUSTODIAL,
    "parent_b": CustodyArrangement.STANDARD,
}


class ScenarioError(ValueError):
    """Raised when a scenario cannot be read or fails validation."""
    pass


class ParentInput(BaseModel):
    """One parent's income, deductions and custody arrangement."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    gross_monthly: float = Field(0, ge=0, allow_inf_nan=False, description="Gross monthly income")
    self_employment_tax: float = Field(0, ge=0, allow_inf_nan=False)
    preexisting_support: float = Field(0, ge=0, allow_inf_nan=False, description="Court-ordered support for other children")
    custody: CustodyArrangement = CustodyArrangement.NO_VISITATION
    custom_overnights: int = Field(0, ge=0, le=MAX_OVERNIGHTS, description="Used when custody is 'custom'")

    @property
    def deductions(self) -> Deductions:
        return Deductions(
            self_employment_tax=self.self_employment_tax,
            preexisting_support=self.preexisting_support,
        )


class ChildInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    number_of_children: int = Field(1, ge=MIN_CHILDREN, le=MAX_CHILDREN)


class ScenarioDeviations(BaseModel):
    """Deviation choices.

    With auto set, low_income and high_income are derived from the combined
    adjusted income instead of taken as given.
    """
    model_config = ConfigDict(extra="forbid")

    low_income: bool = False
    high_income: bool = False
    other_adjustment: float = Field(0, ge=MIN_OTHER_ADJUSTMENT, le=MAX_OTHER_ADJUSTMENT, description="Percent")
    auto: bool = False


class Scenario(BaseModel):
    """Complete calculator input."""
    model_config = ConfigDict(extra="forbid")

    parent_a: ParentInput = Field(default_factory=lambda: ParentInput(custody=DEFAULT_CUSTODY["parent_a"]))
    parent_b: ParentInput = Field(default_factory=lambda: ParentInput(custody=DEFAULT_CUSTODY["parent_b"]))
    children: ChildInfo = Field(default_factory=ChildInfo)
    expenses: Expenses = Field(default_factory=Expenses)
    deviations: ScenarioDeviations = Field(default_factory=ScenarioDeviations)

    @model_validator(mode="before")
    @classmethod
    def default_custody(cls, data: Any) -> Any:
        """Parent A defaults to custodial, Parent B to standard visitation."""
        if not isinstance(data, dict):
            return data
        for key, custody in DEFAULT_CUSTODY.items():
            parent = data.get(key)
            if isinstance(parent, dict) and "custody" not in parent:
                data = {**data, key: {**parent, "custody": custody.value}}
        return data

    def combined_adjusted_income(self) -> float:
        return (
            adjust_income(self.parent_a.gross_monthly, self.parent_a.deductions)
            + adjust_income(self.parent_b.gross_monthly, self.parent_b.deductions)
        )

    def deviation_options(self) -> DeviationOptions:
        """Deviation options for the engine, resolving auto flags."""
        low_income = self.deviations.low_income
        high_income = self.deviations.high_income

        if self.deviations.auto:
            status = classify_income(self.combined_adjusted_income())
            low_income = status.low_income
            high_income = status.high_income
            logger.debug(f"auto deviations: low_income={low_income}, high_income={high_income}")

        return DeviationOptions(
            low_income=low_income,
            high_income=high_income,
            other_deviations=self.deviations.other_adjustment,
        )

    def calculation_args(self) -> Dict[str, Any]:
        """Keyword arguments for calculate_child_support()."""
        return {
            "income_a": self.parent_a.gross_monthly,
            "income_b": self.parent_b.gross_monthly,
            "deductions_a": self.parent_a.deductions,
            "deductions_b": self.parent_b.deductions,
            "num_children": self.children.number_of_children,
            "expenses": self.expenses,
            "deviations": self.deviation_options(),
            "custody_a": self.parent_a.custody,
            "custody_b": self.parent_b.custody,
            "custom_overnights_a": self.parent_a.custom_overnights,
            "custom_overnights_b": self.parent_b.custom_overnights,
        }


def _format_validation_error(e: ValidationError) -> str:
    """Readable multi-line summary of a pydantic validation error."""
    lines = []
    for error in e.errors():
        path = ".".join(str(p) for p in error["loc"]) if error["loc"] else "root"
        lines.append(f"  {path}: {error['msg']}")
    return "\n".join(lines)


def apply_overrides(data: dict, overrides: Dict[str, Any]) -> dict:
    """Set dot-notation keys (e.g. "parent_a.gross_monthly") in a scenario dict.

    None values are skipped so unset CLI options leave the scenario alone.
    Returns a new dict; the input is not modified.
    """
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in (data or {}).items()}

    for key, value in overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        current = result
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    return result


def scenario_from_dict(data: Optional[dict]) -> Scenario:
    """Validate a scenario dict.

    Raises:
        ScenarioError: If validation fails
    """
    try:
        return Scenario.model_validate(data or {})
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario:\n{_format_validation_error(e)}") from e


def read_scenario_file(path: Union[str, Path]) -> dict:
    """Read a YAML or JSON scenario file into a dict without validating it.

    Raises:
        FileNotFoundError: If the file does not exist
        ScenarioError: If the file is not a YAML/JSON mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ScenarioError(f"Cannot parse {path.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScenarioError(f"{path.name} must contain a mapping, got {type(data).__name__}")
    return data


def load_scenario(path: Union[str, Path]) -> Scenario:
    """Load and validate a scenario file."""
    return scenario_from_dict(read_scenario_file(path))


def run_scenario(scenario: Scenario) -> CalculationResult:
    """Calculate child support for a scenario."""
    return calculate_child_support(
        **scenario.calculation_args(),
        parent_a_name=scenario.parent_a.name,
        parent_b_name=scenario.parent_b.name,
    )


def compare_scenario_parenting_time(scenario: Scenario):
    """Parenting-time comparison for a scenario (see compare_parenting_time)."""
    return compare_parenting_time(**scenario.calculation_args())
