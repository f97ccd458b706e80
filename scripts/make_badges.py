"""Generate printable QR badges from a CSV of `registration_number,name` rows."""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.qr_attendance.qr_attendance.badges.service import make_badge_png
from src.qr_attendance.qr_attendance.core.exceptions import ValidationError


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_file", type=Path)
    parser.add_argument("--out", type=Path, default=REPO_ROOT / "badges")
    args = parser.parse_args()

    args.out.mkdir(parents=True, exist_ok=True)
    written = 0
    with args.csv_file.open(newline="", encoding="utf-8-sig") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            if len(row) < 2:
                print(f"skip line {line_no}: expected registration_number,name")
                continue
            try:
                png = make_badge_png(row[0], row[1])
            except ValidationError as e:
                print(f"skip line {line_no}: {e}")
                continue
            (args.out / f"{row[0].strip()}.png").write_bytes(png)
            written += 1

    print(f"OK: {written} badge(s) written to {args.out}")


if __name__ == "__main__":
    main()
