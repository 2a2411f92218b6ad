"""Rich renderer for child support results.

Transforms SDK results into formatted Rich tables and plain-language
summaries. Formatting is display-only; results keep full precision.
"""

import math
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from childsupport.sdk import BcsoLookup, CalculationResult, Parent, ParentingTimeOption, Payer


def format_currency(amount: float) -> str:
    """Whole-dollar currency, e.g. 1234.5 -> "$1,235"."""
    dollars = int(math.floor(abs(amount) + 0.5))
    sign = "-" if amount < 0 and dollars else ""
    return f"{sign}${dollars:,}"


def format_percentage(value: float) -> str:
    """Fraction as a percentage with one decimal, e.g. 0.6 -> "60.0%"."""
    return f"{value * 100:.1f}%"


def round_up_percentage(value: float) -> int:
    """Fraction as a whole percentage rounded up, e.g. 0.3333 -> 34."""
    return math.ceil(round(value * 100, 6))


def display_name(result: CalculationResult, parent: Parent, labels: Optional[Dict[str, str]] = None) -> str:
    """Parent's name, else the configured label, else "Parent A"/"Parent B"."""
    name = result.parent_a_name if parent == Parent.A else result.parent_b_name
    if name:
        return name
    if labels and labels.get(parent.value):
        return labels[parent.value]
    return f"Parent {parent.value}"


def payer_info(result: CalculationResult, labels: Optional[Dict[str, str]] = None) -> dict:
    """Who pays whom, as display text."""
    if result.payer == Payer.NONE:
        return {
            "text": "No payment required",
            "description": "Both parents have equal support obligations",
            "amount": "$0",
        }

    payer = Parent(result.payer.value)
    payee = Parent.B if payer == Parent.A else Parent.A
    payer_name = display_name(result, payer, labels)
    return {
        "text": f"{payer_name} pays {display_name(result, payee, labels)}",
        "description": f"{payer_name} has the higher support obligation",
        "amount": format_currency(result.amount),
    }


def payment_summary(result: CalculationResult, labels: Optional[Dict[str, str]] = None) -> str:
    """One-line summary, e.g. "Parent B pays Parent A $400/month"."""
    info = payer_info(result, labels)
    if result.payer == Payer.NONE:
        return info["text"]
    return f"{info['text']} {info['amount']}/month"


def explain(result: CalculationResult, labels: Optional[Dict[str, str]] = None) -> List[str]:
    """Plain-language walk through the calculation."""
    paying = Parent.A if result.payer == Payer.A else Parent.B
    share = result.pro_rata_a if paying == Parent.A else result.pro_rata_b
    basic = result.basic_support_a if paying == Parent.A else result.basic_support_b
    expense = result.expenses_a if paying == Parent.A else result.expenses_b
    total_expenses = result.expenses_a + result.expenses_b

    lines = [
        f"Your combined family income is {format_currency(result.combined_income)} per month.",
        f"The guideline table sets the base support amount at {format_currency(result.bcso)} per month "
        f"for this income and number of children.",
        f"{display_name(result, paying, labels)} earns {round_up_percentage(share)}% of the combined income, "
        f"so their share of the base amount is {format_currency(basic)}.",
    ]

    if total_expenses == 0:
        lines.append("No health insurance or child care expenses were entered.")
    elif expense == 0:
        lines.append("No expense reimbursement is owed; the paying parent has no income share.")
    else:
        lines.append(f"Plus {format_currency(expense)} toward health insurance and child care.")

    if result.used_minimum_bracket:
        lines.append("Combined income is below the table minimum; the lowest bracket was used.")
    if result.custody_ambiguous:
        lines.append(
            f"Custody was ambiguous; {display_name(result, Parent.A, labels)} was treated as the custodial parent."
        )

    lines.append(f"Total monthly payment: {payment_summary(result, labels)}.")
    return lines


def render_result(console: Console, result: CalculationResult, labels: Optional[Dict[str, str]] = None) -> None:
    """Render a calculation breakdown as a Rich table plus summary panel.

    Args:
        console: Rich Console instance
        result: Output of calculate_child_support()
        labels: Optional {"A": ..., "B": ...} display labels
    """
    name_a = display_name(result, Parent.A, labels)
    name_b = display_name(result, Parent.B, labels)

    table = Table(title="Child Support Calculation", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column(name_a, justify="right", min_width=12)
    table.add_column(name_b, justify="right", min_width=12)

    table.add_row("Gross Monthly Income", format_currency(result.gross_income_a), format_currency(result.gross_income_b))
    table.add_row("Adjusted Income", format_currency(result.adjusted_income_a), format_currency(result.adjusted_income_b))
    table.add_row("Income Share", format_percentage(result.pro_rata_a), format_percentage(result.pro_rata_b))
    table.add_row("", "", "")
    table.add_row(
        f"[dim]Combined Income {format_currency(result.combined_income)} / BCSO {format_currency(result.bcso)}[/dim]",
        "", "",
    )
    table.add_row("Basic Support", format_currency(result.basic_support_a), format_currency(result.basic_support_b))
    table.add_row("Expenses Share", format_currency(result.expenses_a), format_currency(result.expenses_b))
    table.add_row(
        "Presumptive Support",
        format_currency(result.presumptive_support_a),
        format_currency(result.presumptive_support_b),
    )
    table.add_row(
        "[bold]Final Support[/bold]",
        f"[bold]{format_currency(result.final_support_a)}[/bold]",
        f"[bold]{format_currency(result.final_support_b)}[/bold]",
    )

    console.print(table)

    custodial = display_name(result, result.custodial_parent, labels)
    console.print(
        f"[dim]Custodial parent: {custodial}; "
        f"non-custodial overnights: {result.parenting_time_overnights}/year[/dim]"
    )

    info = payer_info(result, labels)
    style = "green" if result.payer == Payer.NONE else "cyan"
    console.print(Panel(
        f"[bold]{info['text']}[/bold]  {info['amount']}/month\n[dim]{info['description']}[/dim]",
        title="Monthly Payment",
        border_style=style,
    ))

    for line in explain(result, labels):
        console.print(f"  - {line}")


def render_bcso_lookup(console: Console, lookup: BcsoLookup, combined_income: float, num_children: int) -> None:
    """Render a BCSO table lookup."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    table.add_row("Combined Income", format_currency(combined_income))
    rounded = format_currency(lookup.rounded_income) if lookup.rounded_income is not None else "[red]n/a[/red]"
    table.add_row("Rounded Income", rounded)
    table.add_row("Children", str(num_children))
    bracket = format_currency(lookup.bracket_income) if lookup.bracket_income is not None else "[red]none[/red]"
    table.add_row("Bracket", bracket)
    table.add_row("BCSO", f"[bold]{format_currency(lookup.amount)}[/bold]/month")

    console.print(Panel(table, title="BCSO Lookup", border_style="dim"))

    if lookup.used_minimum_bracket:
        console.print(Panel(
            "[yellow]Income is below the table minimum; the lowest bracket was used.[/yellow]",
            title="Note",
            border_style="yellow",
        ))


def render_parenting_time(
    console: Console,
    options: List[ParentingTimeOption],
    labels: Optional[Dict[str, str]] = None,
) -> None:
    """Render a parenting-time comparison."""
    labels = labels or {}

    table = Table(title="Parenting Time Comparison", box=box.ROUNDED)
    table.add_column("Arrangement", style="bold")
    table.add_column("Overnights", justify="right")
    table.add_column("Payer")
    table.add_column("Monthly Amount", justify="right")

    for option in options:
        if option.payer == Payer.NONE:
            payer = "-"
        else:
            payer = labels.get(option.payer.value) or f"Parent {option.payer.value}"
        marker = " [green](current)[/green]" if option.current else ""
        table.add_row(
            f"{option.arrangement.value}{marker}",
            str(option.overnights),
            payer,
            format_currency(option.amount),
        )

    console.print(table)
