"""Child Support Calc MCP Server - FastMCP implementation for calculation tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from childsupport.sdk import (
    ScenarioError,
    compare_scenario_parenting_time,
    get_bcso_amount_with_fallback,
    is_valid_income,
    load_bcso_table,
    run_scenario,
    scenario_from_dict,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("child-support")


# --- Tools ---

@mcp.tool()
async def calculate_support(
    scenario: dict[str, Any] = Field(
        description=(
            "Calculator inputs: parent_a/parent_b (name, gross_monthly, self_employment_tax, "
            "preexisting_support, custody, custom_overnights), children (number_of_children), "
            "expenses (health_insurance, child_care), deviations (low_income, high_income, "
            "other_adjustment, auto)"
        )
    ),
) -> dict[str, Any]:
    """Calculate monthly child support under the Georgia guidelines. Returns the full breakdown and who pays whom."""
    try:
        result = run_scenario(scenario_from_dict(scenario))
        return result.model_dump(mode="json")
    except ScenarioError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Error calculating support: {e}")
        return {"error": str(e)}


@mcp.tool()
async def lookup_bcso(
    combined_income: float = Field(description="Combined adjusted monthly income"),
    num_children: int = Field(description="Number of children (1-6)"),
) -> dict[str, Any]:
    """Look up the basic child support obligation for a combined income and number of children."""
    try:
        lookup = get_bcso_amount_with_fallback(combined_income, num_children)
        output = lookup.model_dump(mode="json")
        output["income_in_table_range"] = is_valid_income(combined_income)
        return output
    except Exception as e:
        logger.error(f"Error looking up BCSO: {e}")
        return {"error": str(e)}


@mcp.tool()
async def compare_parenting_time(
    scenario: dict[str, Any] = Field(description="Calculator inputs, same shape as calculate_support"),
) -> dict[str, Any]:
    """Show how the monthly amount changes across visitation arrangements for the non-custodial parent."""
    try:
        options = compare_scenario_parenting_time(scenario_from_dict(scenario))
        return {"options": [o.model_dump(mode="json") for o in options]}
    except ScenarioError as e:
        return {"error": str(e), "options": []}
    except Exception as e:
        logger.error(f"Error comparing parenting time: {e}")
        return {"error": str(e), "options": []}


# --- Resources ---

@mcp.resource("childsupport://bcso/table")
async def bcso_table_resource() -> str:
    """The BCSO table in use."""
    try:
        return load_bcso_table().model_dump_json(indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
