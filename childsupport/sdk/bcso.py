"""Basic Child Support Obligation (BCSO) table lookup.

The table lives in data/bcso_{year}.yaml and maps combined adjusted monthly
income (in $50 steps) to a monthly obligation per number of children.
Lookups round income to the nearest $50 and then use the nearest bracket at
or below that value.
"""

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .schemas import MAX_CHILDREN, MIN_CHILDREN, BcsoLookup, BcsoTable, BracketEntry

logger = logging.getLogger(__name__)

DEFAULT_TABLE_YEAR = "2025"
INCOME_STEP = 50


class BcsoTableError(ValueError):
    """Raised when a BCSO table file is missing or invalid."""
    pass


def _get_data_dir() -> Path:
    """Get the packaged data directory path."""
    return Path(__file__).parent.parent / "data"  # sdk -> childsupport -> data


@lru_cache(maxsize=None)
def load_bcso_table(year: str = DEFAULT_TABLE_YEAR) -> BcsoTable:
    """Load and validate the BCSO table for a year from data/bcso_YYYY.yaml.

    The result is cached; tables are read-only.

    Raises:
        BcsoTableError: If the file does not exist or fails validation
    """
    table_file = _get_data_dir() / f"bcso_{year}.yaml"
    if not table_file.exists():
        raise BcsoTableError(f"BCSO table not found for year {year}: {table_file}")

    with open(table_file, "r") as f:
        raw = yaml.safe_load(f)

    try:
        table = BcsoTable.model_validate(raw)
    except ValidationError as e:
        raise BcsoTableError(f"Invalid BCSO table {table_file.name}: {e}") from e

    logger.debug(f"Loaded BCSO table {table_file.name}: {len(table.brackets)} brackets")
    return table


def round_income(income: float) -> int:
    """Round income to the nearest $50, halves rounding up.

    Example: 825 -> 850, 824 -> 800

    Income must be finite; callers resolve inf/nan before rounding.
    """
    return int(math.floor(income / INCOME_STEP + 0.5) * INCOME_STEP)


def find_bcso_bracket(income: float, table: Optional[BcsoTable] = None) -> Optional[BracketEntry]:
    """Find the bracket for an income.

    Uses the exact bracket at the rounded income if there is one, otherwise
    the highest bracket whose income is at or below it. Incomes above the
    top bracket resolve to the top bracket.

    Returns:
        The bracket, or None if the rounded income is below the lowest bracket
        (or is nan/-inf)
    """
    if table is None:
        table = load_bcso_table()

    if not math.isfinite(income):
        if income > 0 and table.brackets:
            return table.brackets[-1]
        return None

    rounded = round_income(income)
    match = None
    for entry in table.brackets:
        if entry.income == rounded:
            return entry
        if entry.income > rounded:
            break
        match = entry
    return match


def get_bcso_amount_with_fallback(
    combined_income: float,
    num_children: int,
    table: Optional[BcsoTable] = None,
) -> BcsoLookup:
    """Look up the BCSO and report whether the minimum bracket was used.

    Positive incomes below the table floor resolve to the lowest bracket
    rather than failing (very-low-income fallback). Non-positive incomes and
    child counts outside 1-6 yield 0. An infinite income resolves to the top
    bracket and nan to 0; rounded_income is None for both.
    """
    if table is None:
        table = load_bcso_table()

    rounded = round_income(combined_income) if math.isfinite(combined_income) else None

    if not is_valid_children(num_children):
        return BcsoLookup(amount=0, rounded_income=rounded)

    bracket = find_bcso_bracket(combined_income, table)
    used_minimum = False

    if bracket is None:
        if not combined_income > 0 or rounded is None or not table.brackets:
            return BcsoLookup(amount=0, rounded_income=rounded)
        bracket = table.brackets[0]
        used_minimum = True
        logger.debug(f"Income {combined_income:.2f} below table floor, using {bracket.income} bracket")

    return BcsoLookup(
        amount=bracket.amount_for(num_children),
        rounded_income=rounded,
        bracket_income=bracket.income,
        used_minimum_bracket=used_minimum,
    )


def get_bcso_amount(combined_income: float, num_children: int, table: Optional[BcsoTable] = None) -> float:
    """Monthly BCSO for a combined adjusted income and number of children."""
    return get_bcso_amount_with_fallback(combined_income, num_children, table).amount


def is_valid_income(income: float, table: Optional[BcsoTable] = None) -> bool:
    """True if income is inside the table's documented range."""
    if table is None:
        table = load_bcso_table()
    return table.minimum_income <= income <= table.maximum_income


def is_valid_children(num_children) -> bool:
    """True if num_children is a whole number from 1 to 6."""
    if isinstance(num_children, bool) or not isinstance(num_children, (int, float)):
        return False
    if not float(num_children).is_integer():
        return False
    return MIN_CHILDREN <= num_children <= MAX_CHILDREN
