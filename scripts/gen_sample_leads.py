#!/usr/bin/env python3
"""Sample lead file generator.

Generates a synthetic lead workbook (or CSV) in the import template layout:
- Row 1: Header row with the template column labels
- Row 2+: Data rows

A share of the rows can be made invalid on purpose (missing student name,
short contact number) to exercise the error report.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from lead_import.models.columns import TemplateColumn

FIRST_NAMES = ["Asha", "Ravi", "Meera", "Arjun", "Kavya", "Rohan", "Isha", "Vikram", "Diya", "Kabir"]
LAST_NAMES = ["Rao", "Sharma", "Iyer", "Patel", "Reddy", "Nair", "Gupta", "Singh"]
CLASSES = [f"Class {n}" for n in range(1, 11)]
BOARDS = ["CBSE", "ICSE", "State Board"]
CITIES = ["New Delhi", "Bengaluru", "Chennai", "Hyderabad", "Pune"]


def generate_leads(rows: int, invalid_ratio: float = 0.0, seed: int = 42) -> pd.DataFrame:
    """Generate a DataFrame of synthetic leads keyed by template labels.

    Args:
        rows: Number of data rows
        invalid_ratio: Share of rows (0..1) broken on purpose
        seed: Random seed for reproducible data
    """
    rng = np.random.default_rng(seed)

    first = rng.choice(FIRST_NAMES, rows)
    last = rng.choice(LAST_NAMES, rows)
    current = rng.integers(0, len(CLASSES) - 1, rows)

    data: dict[str, list[object]] = {
        TemplateColumn.STUDENT_NAME.label: [f"{f} {s}" for f, s in zip(first, last)],
        TemplateColumn.GENDER.label: rng.choice(["Male", "Female"], rows).tolist(),
        TemplateColumn.CURRENT_CLASS.label: [CLASSES[i] for i in current],
        TemplateColumn.CLASS_APPLYING_FOR.label: [CLASSES[i + 1] for i in current],
        TemplateColumn.ACADEMIC_YEAR.label: ["2026-2027"] * rows,
        TemplateColumn.FATHER_NAME.label: [f"Mr. {s}" for s in last],
        TemplateColumn.PRIMARY_CONTACT_PERSON.label: rng.choice(["father", "mother"], rows).tolist(),
        TemplateColumn.PRIMARY_CONTACT_NUMBER.label: [
            str(n) for n in rng.integers(6_000_000_000, 9_999_999_999, rows)
        ],
        TemplateColumn.AREA_CITY.label: rng.choice(CITIES, rows).tolist(),
        TemplateColumn.BOARD.label: rng.choice(BOARDS, rows).tolist(),
    }
    df = pd.DataFrame(data)

    invalid = rng.random(rows) < invalid_ratio
    for idx in np.flatnonzero(invalid):
        if rng.random() < 0.5:
            df.at[idx, TemplateColumn.STUDENT_NAME.label] = ""
        else:
            df.at[idx, TemplateColumn.PRIMARY_CONTACT_NUMBER.label] = "98765"
    return df


def write_leads(output_path: Path, df: pd.DataFrame) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Leads", index=False)
    print(f"Created lead file: {output_path}")
    print(f"  Rows: {len(df)} (+ 1 header row)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic lead import file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s leads.xlsx --rows 500
  %(prog)s leads.csv --rows 100 --invalid-ratio 0.2
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx or .csv path")
    parser.add_argument("--rows", type=int, default=100, help="Number of data rows (default: 100)")
    parser.add_argument(
        "--invalid-ratio", type=float, default=0.0, help="Share of rows made invalid (default: 0)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.invalid_ratio <= 1.0:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in {".xlsx", ".csv"}:
        print("Error: output must end in .xlsx or .csv", file=sys.stderr)
        return 1

    write_leads(args.output, generate_leads(args.rows, args.invalid_ratio, args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
