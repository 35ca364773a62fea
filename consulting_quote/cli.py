"""CLI entry point for quoting a business profile."""

import argparse
import json
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .calculators.pricing_tables import PricingTableError, get_pricing_tables, load_pricing_tables
from .calculators.quote_calculator import QuoteCalculator, UnknownEntityTypeError
from .formatting import format_currency, format_quote
from .models import profile_from_fields


def _read_profile(source: str) -> dict:
    if source == "-":
        fields = json.load(sys.stdin)
    else:
        with open(source) as f:
            fields = json.load(f)
    if not isinstance(fields, dict):
        raise ValueError("Profile must be a JSON object of questionnaire fields")
    return fields


def _render(console: Console, quote: dict, symbol: str):
    formatted = format_quote(quote, symbol)
    breakdown = formatted["breakdown"]
    table = Table(title=f"Quote: {quote['baseServices']['entityType']}")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    table.add_row("Base price", format_currency(breakdown["basePrice"], symbol))
    table.add_row(f"Revenue adjustment ({quote['revenueModifier']}x)",
                  format_currency(breakdown["revenueAdjustment"], symbol))
    table.add_row(f"Complexity adjustment ({quote['complexityModifier']:.2f}x)",
                  format_currency(breakdown["complexityAdjustment"], symbol))
    table.add_row(f"Industry adjustment ({quote['industryModifier']}x)",
                  format_currency(breakdown["industryAdjustment"], symbol))
    table.add_row("Payroll processing", format_currency(breakdown["payrollCost"], symbol))
    table.add_row("[bold]Monthly total[/]", f"[bold]{formatted['monthly']}[/]")
    table.add_row("Annual total", formatted["annual"])
    console.print(table)

    if formatted["complexityFactors"]:
        console.print("[bold]Complexity factors:[/] " + ", ".join(formatted["complexityFactors"]))
    console.print("[bold]Included services:[/]")
    for service in formatted["services"]:
        console.print(f"  • {service}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="consulting-quote",
        description="Calculate a monthly accounting fee quote for a business profile.",
    )
    parser.add_argument(
        "--profile",
        required=True,
        help="JSON file with questionnaire fields (entityType, annualRevenue, ...), or - for stdin",
    )
    parser.add_argument(
        "--pricing",
        default=None,
        help="Pricing tables JSON (default: configured tables)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw quote JSON instead of a table",
    )
    args = parser.parse_args(argv)

    console = Console()

    try:
        tables = load_pricing_tables(args.pricing) if args.pricing else get_pricing_tables()
        calculator = QuoteCalculator(tables)
        quote = calculator.calculate(profile_from_fields(_read_profile(args.profile))).to_dict()
    except (UnknownEntityTypeError, PricingTableError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if args.json:
        print(json.dumps(quote, indent=2))
    else:
        _render(console, quote, calculator.currency_symbol)


if __name__ == "__main__":
    main()
