"""
Medication-overuse (MOH) risk classification.

Maps (acute-med days, triptan days) per 30 days → a risk level.
Designed as a decision tree for interpretability; first match wins.
The result is an orientation note, never a diagnosis.
"""

from typing import Tuple

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.definitions import MOH_RATIONALE
from miary.models import (
    ConfidenceLevel,
    CoreMetrics,
    MOHAssessment,
    MOHTriggers,
    RiskLevel,
)
from miary.stats import format_number, round_half_away


def normalize_per_30(core: CoreMetrics, cfg: MiaryConfig) -> Tuple[float, float]:
    """
    Scale acute-med and triptan day counts to a 30-day basis.

    The factor is 30 / days_in_range, or 1 for an empty range.

    Returns:
        (acute_med_days_per_30, triptan_days_per_30), one decimal each
    """
    m = cfg.moh

    def scale(day_count: int) -> float:
        if core.days_in_range == 0:
            return float(day_count)
        # Multiply before dividing: 15 * 30 / 90 is exactly 5.0
        return round_half_away(
            day_count * m.normalization_days / core.days_in_range,
            m.per_30_digits,
        )

    return scale(core.acute_med_days), scale(core.triptan_days)


def classify_moh_risk(
    acute_med_days_per_30: float,
    triptan_days_per_30: float,
    cfg: MiaryConfig,
) -> RiskLevel:
    """
    Classify medication-overuse risk.

    Levels:
        likely    — either normalized value reaches its threshold
        possible  — either value reaches possible_fraction of its threshold
        none      — everything else

    Raising either input never lowers the level.
    """
    m = cfg.moh

    if (
        triptan_days_per_30 >= m.triptan_days_per_month
        or acute_med_days_per_30 >= m.acute_med_days_per_month
    ):
        return "likely"

    if (
        triptan_days_per_30 >= m.triptan_days_per_month * m.possible_fraction
        or acute_med_days_per_30 >= m.acute_med_days_per_month * m.possible_fraction
    ):
        return "possible"

    return "none"


def moh_confidence(core: CoreMetrics, cfg: MiaryConfig) -> ConfidenceLevel:
    """Short ranges and sparse documentation lower confidence."""
    m = cfg.moh

    if core.days_in_range == 0:
        return "low"

    documented_ratio = core.documented_days / core.days_in_range
    if (
        core.days_in_range < m.min_days_for_high_confidence
        or documented_ratio < m.min_documented_ratio
    ):
        return "medium"

    return "high"


def compute_moh(core: CoreMetrics, cfg: MiaryConfig | None = None) -> MOHAssessment:
    """Normalize, classify and attach the fixed rationale for the risk level."""
    if cfg is None:
        cfg = DEFAULT_CONFIG
    m = cfg.moh

    acute_per_30, triptan_per_30 = normalize_per_30(core, cfg)
    risk_level = classify_moh_risk(acute_per_30, triptan_per_30, cfg)

    rationale = MOH_RATIONALE[risk_level].format(
        acute=format_number(acute_per_30),
        triptan=format_number(triptan_per_30),
        acute_threshold=format_number(m.acute_med_days_per_month),
        triptan_threshold=format_number(m.triptan_days_per_month),
    )

    return MOHAssessment(
        risk_level=risk_level,
        triggers=MOHTriggers(
            acute_med_days_per_30=acute_per_30,
            triptan_days_per_30=triptan_per_30,
            acute_med_days_threshold=m.acute_med_days_per_month,
            triptan_days_threshold=m.triptan_days_per_month,
        ),
        rationale=rationale,
        confidence=moh_confidence(core, cfg),
    )
