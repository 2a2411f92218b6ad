"""Child Support Calc CLI - Command-line interface for guideline calculations."""

import json
import logging
import os

import click
from rich.console import Console

from childsupport import __version__
from childsupport.sdk import (
    CustodyArrangement,
    ScenarioError,
    apply_overrides,
    compare_scenario_parenting_time,
    get_bcso_amount_with_fallback,
    get_setting,
    is_valid_income,
    read_scenario_file,
    run_scenario,
    scenario_from_dict,
)

from .renderers.result_renderer import render_bcso_lookup, render_parenting_time, render_result
from .settings_commands import settings as settings_group


CUSTODY_CHOICES = [a.value for a in CustodyArrangement]

# CLI option -> scenario key
SCENARIO_OPTIONS = {
    "name_a": "parent_a.name",
    "name_b": "parent_b.name",
    "income_a": "parent_a.gross_monthly",
    "income_b": "parent_b.gross_monthly",
    "se_tax_a": "parent_a.self_employment_tax",
    "se_tax_b": "parent_b.self_employment_tax",
    "prior_support_a": "parent_a.preexisting_support",
    "prior_support_b": "parent_b.preexisting_support",
    "custody_a": "parent_a.custody",
    "custody_b": "parent_b.custody",
    "overnights_a": "parent_a.custom_overnights",
    "overnights_b": "parent_b.custom_overnights",
    "children": "children.number_of_children",
    "health_insurance": "expenses.health_insurance",
    "child_care": "expenses.child_care",
    "low_income": "deviations.low_income",
    "high_income": "deviations.high_income",
    "other_deviation": "deviations.other_adjustment",
    "auto_deviations": "deviations.auto",
}


def scenario_options(f):
    """Options shared by commands that take a scenario."""
    options = [
        click.argument("scenario_file", required=False, type=click.Path(exists=True, dir_okay=False)),
        click.option("--name-a", help="Parent A's name (display only)"),
        click.option("--name-b", help="Parent B's name (display only)"),
        click.option("--income-a", type=float, help="Parent A's gross monthly income"),
        click.option("--income-b", type=float, help="Parent B's gross monthly income"),
        click.option("--se-tax-a", type=float, help="Parent A's self-employment tax"),
        click.option("--se-tax-b", type=float, help="Parent B's self-employment tax"),
        click.option("--prior-support-a", type=float, help="Parent A's preexisting support order"),
        click.option("--prior-support-b", type=float, help="Parent B's preexisting support order"),
        click.option("--custody-a", type=click.Choice(CUSTODY_CHOICES), help="Parent A's custody arrangement"),
        click.option("--custody-b", type=click.Choice(CUSTODY_CHOICES), help="Parent B's custody arrangement"),
        click.option("--overnights-a", type=int, help="Parent A's annual overnights (custom custody)"),
        click.option("--overnights-b", type=int, help="Parent B's annual overnights (custom custody)"),
        click.option("--children", "-n", type=int, help="Number of children (1-6)"),
        click.option("--health-insurance", type=float, help="Monthly health insurance for the children"),
        click.option("--child-care", type=float, help="Monthly work-related child care"),
        click.option("--low-income/--no-low-income", default=None, help="Apply the low-income deviation"),
        click.option("--high-income/--no-high-income", default=None, help="Apply the high-income deviation"),
        click.option("--other-deviation", type=float, help="Other court-approved deviation in percent (-100 to 1000)"),
        click.option("--auto-deviations/--no-auto-deviations", default=None,
                     help="Derive low/high income deviations from combined income"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_scenario(scenario_file, cli_values: dict):
    """Scenario from an optional file with CLI options layered on top."""
    try:
        data = read_scenario_file(scenario_file) if scenario_file else {}
        overrides = {SCENARIO_OPTIONS[k]: v for k, v in cli_values.items() if k in SCENARIO_OPTIONS}
        return scenario_from_dict(apply_overrides(data, overrides))
    except (FileNotFoundError, ScenarioError) as e:
        raise click.ClickException(str(e))


def _labels() -> dict:
    """Display labels from settings."""
    return {"A": get_setting("parent_a_label"), "B": get_setting("parent_b_label")}


def _output_format(output_format):
    return output_format or get_setting("default_output_format", "text")


FORMAT_OPTION = click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), default=None,
    help="Output format (default: settings default_output_format, else text)",
)


@click.group()
@click.version_option(version=__version__, prog_name="child-support")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging for each calculation step.")
def cli(verbose):
    """Child Support Calc - Georgia child support guideline estimates.

    Inputs come from a scenario file (YAML or JSON), command-line options,
    or both; options override values from the file.

    Settings are loaded from (in order):

    \b
    1. CHILD_SUPPORT_CONFIG_PATH environment variable
    2. ~/.config/child-support/settings.json (XDG default)

    Results are estimates, not legal advice.
    """
    if verbose:
        logging.getLogger("childsupport").setLevel(logging.DEBUG)


cli.add_command(settings_group)


@cli.command("calculate")
@scenario_options
@FORMAT_OPTION
def calculate(scenario_file, output_format, **cli_values):
    """Calculate monthly child support.

    SCENARIO_FILE is an optional YAML/JSON scenario. Without one, Parent A
    defaults to custodial and Parent B to standard visitation.

    Examples:

    \b
        child-support calculate --income-a 4000 --income-b 2000 -n 2
        child-support calculate family.yaml --other-deviation -10 --format json
    """
    scenario = _build_scenario(scenario_file, cli_values)
    result = run_scenario(scenario)

    if _output_format(output_format) == "json":
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    render_result(Console(), result, _labels())


@cli.command("parenting-time")
@scenario_options
@FORMAT_OPTION
def parenting_time(scenario_file, output_format, **cli_values):
    """Compare results across visitation arrangements.

    Keeps the custodial parent fixed and recalculates with the other parent
    on each standard arrangement (no visitation through shared).
    """
    scenario = _build_scenario(scenario_file, cli_values)
    options = compare_scenario_parenting_time(scenario)

    if _output_format(output_format) == "json":
        click.echo(json.dumps([o.model_dump(mode="json") for o in options], indent=2))
        return

    labels = _labels()
    if scenario.parent_a.name:
        labels["A"] = scenario.parent_a.name
    if scenario.parent_b.name:
        labels["B"] = scenario.parent_b.name
    render_parenting_time(Console(), options, labels)


@cli.command("bcso")
@click.argument("income", type=float)
@click.argument("children", type=int)
@FORMAT_OPTION
def bcso(income, children, output_format):
    """Look up the basic child support obligation.

    INCOME is the combined adjusted monthly income; CHILDREN is 1-6.
    """
    lookup = get_bcso_amount_with_fallback(income, children)

    if _output_format(output_format) == "json":
        output = lookup.model_dump(mode="json")
        output["income_in_table_range"] = is_valid_income(income)
        click.echo(json.dumps(output, indent=2))
        return

    if not 1 <= children <= 6:
        click.echo(f"Warning: {children} children is outside the table (1-6); BCSO is $0.", err=True)

    render_bcso_lookup(Console(), lookup, income, children)


def main():
    """Entry point for the CLI."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )
    cli()


if __name__ == "__main__":
    main()
