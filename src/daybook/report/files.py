"""Daily report files under <base>/<MMM-YYYY>/<DD-MMM-YYYY>.txt."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from daybook.report.render import MONTH_FORMAT, format_report_date


def report_path(base_dir: str | Path, as_of: dt.date) -> Path:
    """Path of the daily file for as_of (month folder and file name both from the as-of date)."""
    return Path(base_dir) / as_of.strftime(MONTH_FORMAT) / f"{format_report_date(as_of)}.txt"


def write_report(base_dir: str | Path, as_of: dt.date, text: str) -> Path:
    """Write (or overwrite) the daily file. Returns its path."""
    path = report_path(base_dir, as_of)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
