"""
Core metrics: day-based KPIs from per-day diary aggregates.

Every count is a number of calendar days. Intake totals are passed through
unchanged when the caller has them. migraine_days is never computed.
"""

from dataclasses import asdict
from typing import Optional, Sequence

import pandas as pd

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.models import CoreMetrics, DayRecord
from miary.stats import round_half_away, rounded_mean, rounded_median


DAY_COLUMNS = (
    "documented",
    "headache",
    "pain_max",
    "acute_med_used",
    "triptan_used",
)


def records_to_frame(days: Sequence[DayRecord]) -> pd.DataFrame:
    """One row per day record; an empty sequence yields an empty frame with all columns."""
    df = pd.DataFrame([asdict(d) for d in days], columns=list(DAY_COLUMNS))
    for col in ("documented", "headache", "acute_med_used", "triptan_used"):
        df[col] = df[col].astype(bool)
    df["pain_max"] = pd.to_numeric(df["pain_max"], errors="coerce")
    return df


def compute_core_metrics(
    days_in_range: int,
    days: Sequence[DayRecord],
    total_intakes_acute: Optional[int] = None,
    total_intakes_triptan: Optional[int] = None,
    cfg: MiaryConfig | None = None,
) -> CoreMetrics:
    """
    Count documented, headache and medication days over the range.

    Pain statistics use headache days with pain_max > 0 only. With no such
    days (or an empty range) they are None; nothing is divided by zero.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG
    digits = cfg.core.pain_digits

    df = records_to_frame(days)

    documented_days = int(df["documented"].sum())
    headache_days = int(df["headache"].sum())

    pain = df.loc[df["headache"] & (df["pain_max"] > 0), "pain_max"]
    max_pain = round_half_away(float(pain.max()), digits) if not pain.empty else None

    return CoreMetrics(
        days_in_range=days_in_range,
        documented_days=documented_days,
        undocumented_days=max(0, days_in_range - documented_days),
        headache_days=headache_days,
        avg_pain_on_headache_days=rounded_mean(pain, digits),
        median_pain_on_headache_days=rounded_median(pain, digits),
        max_pain=max_pain,
        acute_med_days=int(df["acute_med_used"].sum()),
        triptan_days=int(df["triptan_used"].sum()),
        total_intakes_acute=total_intakes_acute,
        total_intakes_triptan=total_intakes_triptan,
    )
