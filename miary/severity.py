"""
Severity summary (ME/CFS burden): per-day max severity segmented into buckets.

Days without a severity value, and range days missing from the input, are
counted as undocumented. They are never filled by projection.
"""

from typing import Sequence

import pandas as pd

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.models import Guardrail, SeverityDay, SeveritySegment, SeveritySummary


SEGMENT_KEYS = ("none", "mild", "moderate", "severe", "undocumented")


def evaluate_guardrail(documented_days: int, cfg: MiaryConfig) -> Guardrail:
    """Block inference on no data or fewer than min_days_for_inference days."""
    if documented_days == 0:
        return Guardrail(ok=False, reason="NO_DATA")
    if documented_days < cfg.severity.min_days_for_inference:
        return Guardrail(ok=False, reason="TOO_FEW_DAYS")
    return Guardrail(ok=True)


def compute_severity_summary(
    days_in_range: int,
    days: Sequence[SeverityDay],
    cfg: MiaryConfig | None = None,
) -> SeveritySummary:
    if cfg is None:
        cfg = DEFAULT_CONFIG

    levels = pd.Series(
        [d.max_severity if d.max_severity is not None else "undocumented" for d in days],
        dtype=object,
    )
    counts = levels.value_counts().reindex(SEGMENT_KEYS, fill_value=0)

    documented = int(counts.drop("undocumented").sum())
    # Range days absent from the input are undocumented as well
    counts["undocumented"] += max(0, days_in_range - len(days))

    return SeveritySummary(
        segments=tuple(
            SeveritySegment(key=key, days=int(counts[key])) for key in SEGMENT_KEYS
        ),
        documented_days=documented,
        total_days_in_range=days_in_range,
        guardrail=evaluate_guardrail(documented, cfg),
        no_extrapolation=True,
    )
