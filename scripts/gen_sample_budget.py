#!/usr/bin/env python3
"""Sample cost breakdown generator for manual and performance testing.

Generates a synthetic construction budget workbook shaped like real bids:
- Rows 1-3: title block (company / project / preparer)
- Row 4: header row (Item Description, Qty, Unit Cost, Total)
- Row 5+: CSI division headings, line items, division totals, grand total

The output can be fed straight into ``cpace-estimator analyze``.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADERS = ["Item Description", "Qty", "Unit Cost", "Total"]

# division code -> (division name, line item descriptions)
DIVISIONS: dict[int, tuple[str, list[str]]] = {
    3: ("Concrete", ["Slab on grade", "Concrete footings"]),
    7: ("Thermal and Moisture Protection", ["Roof insulation upgrade", "TPO roof membrane", "Air sealing"]),
    8: ("Openings", ["Double pane window replacement", "Storefront glazing", "Insulated overhead door"]),
    9: ("Finishes", ["Interior paint", "Carpet tile", "Drywall patching"]),
    22: ("Plumbing", ["Low-flow fixtures", "Domestic water piping", "Sanitary sewer tie-in"]),
    23: ("HVAC", ["Rooftop unit replacement", "VRF heat pump system", "Ductwork", "Thermostat controls"]),
    26: ("Electrical", ["LED lighting retrofit", "Electrical panel upgrade", "Occupancy sensors", "Wiring"]),
    48: ("Electrical Power Generation", ["Rooftop solar PV array", "Battery storage system", "EV charging station"]),
}


def generate_budget_rows(items_per_division: int, seed: int = 42) -> list[list[object]]:
    """Build raw sheet rows (title block + header + divisions + totals).

    Args:
        items_per_division: line items emitted under each division heading
        seed: random seed for reproducible quantities / prices

    Returns:
        Rows as lists, ready for ``pd.DataFrame(rows).to_excel(header=False)``
    """
    rng = np.random.default_rng(seed)
    rows: list[list[object]] = [
        ["Sample Builders Inc."],
        ["Project: Synthetic Retrofit"],
        ["Prepared by: gen_sample_budget.py"],
        list(HEADERS),
    ]
    grand_total = 0.0
    for code, (name, descriptions) in DIVISIONS.items():
        rows.append([f"Division {code:02d} - {name}", None, None, None])
        division_total = 0.0
        for j in range(items_per_division):
            qty = int(rng.integers(1, 50))
            unit_cost = float(np.round(rng.uniform(50, 25_000), 2))
            total = round(qty * unit_cost, 2)
            rows.append([descriptions[j % len(descriptions)], qty, unit_cost, total])
            division_total += total
        rows.append([f"Division {code:02d} Total", None, None, round(division_total, 2)])
        grand_total += division_total
    rows.append(["Grand Total", None, None, round(grand_total, 2)])
    return rows


def create_budget_file(output_path: Path, items_per_division: int, sheet: str = "Budget", seed: int = 42) -> int:
    """Write the sample budget as .xlsx (or .csv by suffix); returns the row count."""
    rows = generate_budget_rows(items_per_division, seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, header=False, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return len(rows)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic construction cost breakdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Small budget (3 items per division)
  %(prog)s data/sample.xlsx

  # Large budget for timing runs
  %(prog)s data/large.xlsx --items 2500

  # CSV output
  %(prog)s data/sample.csv --items 10 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx or .csv path")
    parser.add_argument("--items", type=int, default=3, help="Line items per division (default: 3)")
    parser.add_argument("--sheet", default="Budget", help="Sheet name for .xlsx output (default: Budget)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.items <= 0:
        print("Error: --items must be positive", file=sys.stderr)
        return 1

    try:
        n_rows = create_budget_file(args.output, args.items, args.sheet, args.seed)
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        return 1

    print(f"Created sample budget: {args.output}")
    print(f"  Divisions: {len(DIVISIONS)}")
    print(f"  Line items: {len(DIVISIONS) * args.items:,}")
    print(f"  Sheet rows: {n_rows:,}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
