"""Child Support Calc SDK - Core functionality for guideline calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    validate_setting,
    SettingsError,
    SETTINGS_DEFAULTS,
    OUTPUT_FORMATS,
)

from .schemas import (
    BracketEntry,
    BcsoTable,
    BcsoLookup,
    CalculationResult,
    CustodyArrangement,
    CustodyResolution,
    Deductions,
    DeviationOptions,
    Expenses,
    IncomeStatus,
    Parent,
    ParentingTimeOption,
    Payer,
)

from .bcso import (
    load_bcso_table,
    round_income,
    find_bcso_bracket,
    get_bcso_amount,
    get_bcso_amount_with_fallback,
    is_valid_income,
    is_valid_children,
    BcsoTableError,
)

from .custody import (
    get_overnights,
    resolve_custody,
    ARRANGEMENT_OVERNIGHTS,
)

from .calculations import (
    adjust_income,
    calculate_pro_rata,
    lookup_bcso,
    allocate_expenses,
    apply_adjustments,
    apply_deviations,
    classify_income,
    calculate_child_support,
    compare_parenting_time,
)

from .scenario import (
    Scenario,
    ScenarioError,
    apply_overrides,
    scenario_from_dict,
    read_scenario_file,
    load_scenario,
    run_scenario,
    compare_scenario_parenting_time,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "validate_setting",
    "SettingsError",
    "SETTINGS_DEFAULTS",
    "OUTPUT_FORMATS",
    # Schemas
    "BracketEntry",
    "BcsoTable",
    "BcsoLookup",
    "CalculationResult",
    "CustodyArrangement",
    "CustodyResolution",
    "Deductions",
    "DeviationOptions",
    "Expenses",
    "IncomeStatus",
    "Parent",
    "ParentingTimeOption",
    "Payer",
    # BCSO table
    "load_bcso_table",
    "round_income",
    "find_bcso_bracket",
    "get_bcso_amount",
    "get_bcso_amount_with_fallback",
    "is_valid_income",
    "is_valid_children",
    "BcsoTableError",
    # Custody
    "get_overnights",
    "resolve_custody",
    "ARRANGEMENT_OVERNIGHTS",
    # Calculations
    "adjust_income",
    "calculate_pro_rata",
    "lookup_bcso",
    "allocate_expenses",
    "apply_adjustments",
    "apply_deviations",
    "classify_income",
    "calculate_child_support",
    "compare_parenting_time",
    # Scenarios
    "Scenario",
    "ScenarioError",
    "apply_overrides",
    "scenario_from_dict",
    "read_scenario_file",
    "load_scenario",
    "run_scenario",
    "compare_scenario_parenting_time",
]
