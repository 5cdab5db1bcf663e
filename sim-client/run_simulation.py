"""CLI client for the propsim API: posts a draft and prints a terminal report.

Usage:
    python sim-client/run_simulation.py --price 100000000 --rent 500000 --structure RC --age 0
    python sim-client/run_simulation.py --draft deal.json --stress --exit-year 10
"""

import argparse
import asyncio
import json
import sys
from decimal import Decimal

import httpx


# ── Helpers ──────────────────────────────────────────────────────────────────

def _pct(v) -> str:
    """Format a 0-100 percentage value."""
    return f"{float(v):.2f}%"


def _yen(v) -> str:
    return f"¥{float(v):,.0f}"


def _man(v) -> str:
    """Yen in units of 10,000 (man-yen), the usual unit in listings."""
    return f"{float(v) / 10000:,.0f}万"


def _header(title: str) -> None:
    print(f"\n{'=' * 72}")
    print(f"  {title}")
    print(f"{'=' * 72}")


# ── Payload ──────────────────────────────────────────────────────────────────

FIELD_MAP = {
    "price": "price",
    "rent": "monthly_rent",
    "structure": "structure",
    "age": "building_age",
    "units": "unit_count",
    "loan": "loan_amount",
    "rate": "interest_rate",
    "loan_years": "loan_years",
    "occupancy": "occupancy_rate",
    "other_income": "other_income",
    "exit_year": "exit_year",
}


def build_payload(args: argparse.Namespace) -> dict:
    """Draft JSON from an optional file plus CLI overrides (non-None only)."""
    payload: dict = {}
    if args.draft:
        with open(args.draft, encoding="utf-8") as f:
            payload.update(json.load(f))

    for cli_name, api_name in FIELD_MAP.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            payload[api_name] = str(val) if isinstance(val, Decimal) else val

    if args.corporate:
        payload["tax_kind"] = "CORPORATE"
    if args.stress:
        payload["stress_enabled"] = True
        payload["rent_curve_enabled"] = True
        payload["occupancy_decline_enabled"] = True
    if args.exit_year is not None:
        payload["exit_enabled"] = True
    return payload


# ── Report sections ──────────────────────────────────────────────────────────

def print_acquisition(data: dict) -> None:
    acq = data["acquisition"]
    _header("Acquisition")
    print(f"  Building / Land:      {_man(acq['building_price'])} / {_man(acq['land_price'])}")
    print(f"  Closing Costs:        {_yen(acq['total_costs'])}")
    print(f"  Acquisition Tax:      {_yen(acq['acquisition_tax'])}")
    print(f"  Loan:                 {_yen(acq['loan_principal'])}")
    print(f"  Equity Required:      {_yen(acq['equity_required'])}")


def print_auto_filled(data: dict) -> None:
    filled = data.get("auto_filled", [])
    if not filled:
        return
    _header("Estimated Inputs")
    for item in filled:
        print(f"  {item['field_name']:<32} {str(item['value']):>12}  {item['justification']}")


def print_cashflow_table(rows: list[dict], title: str = "Cash Flow Projections") -> None:
    if not rows:
        return
    _header(title)
    print(
        f"  {'Yr':>3}  {'Income':>12}  {'Debt Svc':>12}  {'CF pre':>12}  "
        f"{'Tax':>10}  {'CF post':>12}  {'DSCR':>6}  {'Balance':>14}"
    )
    print(f"  {'---':>3}  {'-' * 12}  {'-' * 12}  {'-' * 12}  {'-' * 10}  {'-' * 12}  {'-' * 6}  {'-' * 14}")
    for yr in rows:
        flag = " *" if yr.get("principal_exceeds_depreciation") else ""
        print(
            f"  {yr['year']:>3}  {_yen(yr['effective_income']):>12}  "
            f"{_yen(yr['debt_service']):>12}  {_yen(yr['cash_flow_pre_tax']):>12}  "
            f"{_yen(yr['income_tax']):>10}  {_yen(yr['cash_flow_post_tax']):>12}  "
            f"{float(yr['dscr']):>6.2f}  {_yen(yr['loan_balance']):>14}{flag}"
        )
    print("\n  * principal repaid exceeds depreciation")


def print_exit(summary: dict | None, title: str = "Exit (Sale)") -> None:
    if not summary:
        return
    _header(title)
    print(f"  Exit Year:            {summary['exit_year']}")
    print(f"  Sale Price:           {_yen(summary['sale_price'])}")
    print(f"  Transaction Costs:    {_yen(summary['transaction_costs'])}")
    print(f"  Capital Gains Tax:    {_yen(summary['capital_gains_tax'])} ({_pct(summary['capital_gains_rate'])})")
    print(f"  Loan Payoff:          {_yen(summary['loan_payoff'])}")
    print(f"  Net Proceeds:         {_yen(summary['net_proceeds'])}")
    print(f"  NPV:                  {_yen(summary['npv'])}")
    print(f"  IRR:                  {float(summary['irr']) * 100:.2f}%")
    print(f"  Equity Multiple:      {float(summary['equity_multiple']):.2f}x")


def print_report(data: dict) -> None:
    print_acquisition(data)
    print_auto_filled(data)
    print_cashflow_table(data.get("baseline", []))
    if data.get("dead_cross_year"):
        print(f"\n  Dead cross in year {data['dead_cross_year']}")
    if data.get("minimum_dscr") is not None:
        print(f"  Minimum DSCR: {float(data['minimum_dscr']):.2f}")
    print_exit(data.get("exit"))

    scenario = data.get("scenario")
    if scenario:
        print_cashflow_table(scenario.get("yearly", []), title="Stress Scenario")
        if scenario.get("dead_cross_year"):
            print(f"\n  Stressed dead cross in year {scenario['dead_cross_year']}")
        if scenario.get("minimum_dscr") is not None:
            print(f"  Stressed minimum DSCR: {float(scenario['minimum_dscr']):.2f}")
        print_exit(scenario.get("exit"), title="Stress Scenario Exit")
    print()


# ── Main ─────────────────────────────────────────────────────────────────────

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a property cash-flow simulation via the propsim API"
    )
    parser.add_argument("--draft", help="JSON file with draft fields")
    parser.add_argument("--price", type=Decimal, help="Acquisition price (yen)")
    parser.add_argument("--rent", type=Decimal, help="Full-occupancy monthly rent (yen)")
    parser.add_argument(
        "--structure",
        choices=["RC", "SRC", "S_HEAVY", "S_LIGHT", "WOOD"],
        default=None,
        help="Building structure",
    )
    parser.add_argument("--age", type=int, help="Building age at acquisition")
    parser.add_argument("--units", type=int, help="Number of units")
    parser.add_argument("--loan", type=Decimal, help="Loan amount (yen)")
    parser.add_argument("--rate", type=Decimal, help="Annual interest rate (%%)")
    parser.add_argument("--loan-years", type=int, help="Loan term in years")
    parser.add_argument("--occupancy", type=Decimal, help="Occupancy rate (%%)")
    parser.add_argument("--other-income", type=Decimal, help="Other taxable income (yen)")
    parser.add_argument("--corporate", action="store_true", help="Hold through a corporation")
    parser.add_argument("--stress", action="store_true", help="Run the stress scenario")
    parser.add_argument("--exit-year", type=int, help="Sell in this year")
    parser.add_argument(
        "--api-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    return parser.parse_args(argv)


async def main() -> None:
    args = parse_args()
    payload = build_payload(args)
    url = f"{args.api_url}/api/v1/simulate"

    async with httpx.AsyncClient(timeout=60) as client:
        try:
            resp = await client.post(url, json=payload)
        except httpx.ConnectError:
            print(f"Error: Could not connect to API at {args.api_url}", file=sys.stderr)
            print("Is the server running? Start with: uvicorn propsim.api.app:app --reload", file=sys.stderr)
            sys.exit(1)
        except httpx.TimeoutException:
            print("Error: Request timed out", file=sys.stderr)
            sys.exit(1)

        if resp.status_code != 200:
            print(f"Error: API returned {resp.status_code}", file=sys.stderr)
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            print(f"  {detail}", file=sys.stderr)
            sys.exit(1)

        data = resp.json()

    print_report(data)


if __name__ == "__main__":
    asyncio.run(main())
