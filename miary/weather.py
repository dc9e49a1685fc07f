"""
Weather association: barometric pressure vs. headache occurrence.

Deterministic and interpretable. Documented days are bucketed by their
24h pressure change; each bucket reports headache rate, mean pain and
acute-medication rate. A confidence ladder over the paired sample size
decides whether any statement is made at all.

Association only. Nothing here supports a causal or diagnostic claim.
"""

import logging
from dataclasses import asdict
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.definitions import (
    CONFOUNDER_NOTE,
    LOW_DELTA_COVERAGE_NOTE,
    MODERATE_DROP,
    NO_DELTA_NOTE,
    PRESSURE_HIGH,
    PRESSURE_LOW,
    PRESSURE_NORMAL,
    SMALL_BUCKET_NOTE,
    SMALL_TIER_NOTE,
    STABLE_OR_RISE,
    STRONG_DROP,
    TOO_FEW_DELTA_NOTE,
    WEATHER_DISCLAIMER,
    delta_bucket_labels,
    pressure_tier_labels,
)
from miary.models import (
    AbsolutePressureAnalysis,
    PressureDeltaAnalysis,
    RelativeRisk,
    WeatherAssociation,
    WeatherBucket,
    WeatherConfidence,
    WeatherCoverage,
    WeatherDayFeature,
)
from miary.stats import rate, ratio, round_half_away, rounded_mean


logger = logging.getLogger(__name__)

FEATURE_COLUMNS = (
    "date",
    "documented",
    "pain_max",
    "had_headache",
    "had_acute_med",
    "pressure_mb",
    "pressure_change_24h",
    "temperature_c",
    "humidity",
    "weather_coverage",
)

NUMERIC_COLUMNS = ("pain_max", "pressure_mb", "pressure_change_24h", "temperature_c", "humidity")

DELTA_BUCKET_ORDER = (STRONG_DROP, MODERATE_DROP, STABLE_OR_RISE)
PRESSURE_TIER_ORDER = (PRESSURE_LOW, PRESSURE_NORMAL, PRESSURE_HIGH)


# ---------------------------------------------------------------------------
# Frame preparation
# ---------------------------------------------------------------------------

def features_to_frame(features: Sequence[WeatherDayFeature]) -> pd.DataFrame:
    """Documented days only; undocumented days never enter the analysis."""
    df = pd.DataFrame([asdict(f) for f in features], columns=list(FEATURE_COLUMNS))
    for col in ("documented", "had_headache", "had_acute_med"):
        df[col] = df[col].astype(bool)
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df.loc[df["documented"]].reset_index(drop=True)


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def determine_confidence(n_days: int, cfg: MiaryConfig) -> WeatherConfidence:
    """Sample-size ladder: insufficient → low → medium → high."""
    wt = cfg.weather
    if n_days >= wt.high_confidence_days:
        return "high"
    if n_days >= wt.medium_confidence_days:
        return "medium"
    if n_days >= wt.min_days_for_statement:
        return "low"
    return "insufficient"


def build_bucket(key: str, label: str, days: pd.DataFrame, cfg: MiaryConfig) -> WeatherBucket:
    """Rates over all bucket days; mean pain over headache days only."""
    digits = cfg.weather.rate_digits
    return WeatherBucket(
        key=key,
        label=label,
        n_days=len(days),
        headache_rate=rate(days["had_headache"], digits),
        mean_pain_max=rounded_mean(days.loc[days["had_headache"], "pain_max"], digits),
        acute_med_rate=rate(days["had_acute_med"], digits),
    )


def compute_relative_risk(
    reference: WeatherBucket,
    compare: WeatherBucket,
    cfg: MiaryConfig,
) -> Optional[RelativeRisk]:
    """
    Headache-rate ratio compare / reference.

    Both buckets need min_days_per_bucket days. A zero reference rate gives
    rr=None and only the absolute difference.
    """
    wt = cfg.weather
    if reference.n_days < wt.min_days_per_bucket or compare.n_days < wt.min_days_per_bucket:
        return None

    abs_diff = round_half_away(compare.headache_rate - reference.headache_rate, wt.rate_digits)
    if reference.headache_rate == 0:
        rr = None
    else:
        rr = round_half_away(compare.headache_rate / reference.headache_rate, wt.rate_digits)

    return RelativeRisk(
        reference_label=reference.label,
        compare_label=compare.label,
        rr=rr,
        abs_diff=abs_diff,
    )


def _small_bucket_notes(
    buckets: Sequence[WeatherBucket],
    template: str,
    cfg: MiaryConfig,
) -> List[str]:
    minimum = cfg.weather.min_days_per_bucket
    return [
        template.format(label=b.label, n=b.n_days, minimum=minimum)
        for b in buckets
        if 0 < b.n_days < minimum
    ]


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------

def compute_weather_coverage(df: pd.DataFrame, cfg: MiaryConfig) -> WeatherCoverage:
    """Ratios of documented days carrying any weather value and a Δ24h value."""
    digits = cfg.weather.rate_digits
    days_documented = len(df)
    days_with_weather = int((df["pressure_mb"].notna() | df["temperature_c"].notna()).sum())
    days_with_delta = int(df["pressure_change_24h"].notna().sum())
    sources = df["weather_coverage"].value_counts()

    return WeatherCoverage(
        days_documented=days_documented,
        days_with_weather=days_with_weather,
        days_with_delta_24h=days_with_delta,
        ratio_weather=ratio(days_with_weather, days_documented, digits),
        ratio_delta_24h=ratio(days_with_delta, days_documented, digits),
        days_with_entry_weather=int(sources.get("entry", 0)),
        days_with_snapshot_weather=int(sources.get("snapshot", 0)),
        days_with_no_weather=int(sources.get("none", 0)),
    )


# ---------------------------------------------------------------------------
# Primary: pressure change over 24h
# ---------------------------------------------------------------------------

def assign_delta_buckets(paired: pd.DataFrame, cfg: MiaryConfig) -> pd.Series:
    """
    Bucket key per day from pressure_change_24h.

    Right-closed intervals: (-inf, strong] / (strong, moderate] / (moderate, inf).
    """
    wt = cfg.weather
    return pd.cut(
        paired["pressure_change_24h"],
        bins=[-np.inf, wt.delta_strong_drop, wt.delta_moderate_drop, np.inf],
        labels=list(DELTA_BUCKET_ORDER),
        right=True,
    )


def _select_comparator(
    strong: WeatherBucket,
    moderate: WeatherBucket,
    cfg: MiaryConfig,
) -> Optional[WeatherBucket]:
    """Strong drop when it has enough days, else moderate drop; a fixed tie-break."""
    minimum = cfg.weather.min_days_per_bucket
    if strong.n_days >= minimum:
        return strong
    if moderate.n_days >= minimum:
        return moderate
    return None


def _confounder_spread_exceeded(buckets: Sequence[WeatherBucket], cfg: MiaryConfig) -> bool:
    wt = cfg.weather
    rates = [b.acute_med_rate for b in buckets if b.n_days >= wt.min_days_per_bucket]
    if len(rates) < 2:
        return False
    spread = round_half_away(max(rates) - min(rates), wt.rate_digits)
    return spread > wt.confounder_rate_spread


def analyze_pressure_delta(
    df: pd.DataFrame,
    coverage: WeatherCoverage,
    cfg: MiaryConfig,
) -> PressureDeltaAnalysis:
    wt = cfg.weather
    notes: List[str] = []

    paired = df.loc[df["pressure_change_24h"].notna()]
    confidence = determine_confidence(len(paired), cfg)

    if confidence == "insufficient":
        if paired.empty:
            notes.append(NO_DELTA_NOTE)
        else:
            notes.append(TOO_FEW_DELTA_NOTE.format(n=len(paired), minimum=wt.min_days_for_statement))
        logger.info("Pressure Δ24h analysis disabled: %d paired days", len(paired))
        return PressureDeltaAnalysis(
            enabled=False,
            confidence=confidence,
            buckets=(),
            relative_risk=None,
            notes=tuple(notes),
        )

    keys = assign_delta_buckets(paired, cfg)
    labels = delta_bucket_labels(wt.delta_strong_drop, wt.delta_moderate_drop)
    strong, moderate, stable = (
        build_bucket(key, labels[key], paired.loc[keys == key], cfg)
        for key in DELTA_BUCKET_ORDER
    )
    buckets = (strong, moderate, stable)

    notes.extend(_small_bucket_notes(buckets, SMALL_BUCKET_NOTE, cfg))

    relative_risk = None
    if stable.n_days >= wt.min_days_per_bucket:
        comparator = _select_comparator(strong, moderate, cfg)
        if comparator is not None:
            relative_risk = compute_relative_risk(stable, comparator, cfg)

    if coverage.ratio_delta_24h < wt.low_delta_coverage:
        notes.append(LOW_DELTA_COVERAGE_NOTE)

    if _confounder_spread_exceeded(buckets, cfg):
        notes.append(CONFOUNDER_NOTE)

    return PressureDeltaAnalysis(
        enabled=True,
        confidence=confidence,
        buckets=buckets,
        relative_risk=relative_risk,
        notes=tuple(notes),
    )


# ---------------------------------------------------------------------------
# Secondary: absolute pressure
# ---------------------------------------------------------------------------

def assign_pressure_tiers(paired: pd.DataFrame, cfg: MiaryConfig) -> np.ndarray:
    """Tier key per day: low < pressure_low ≤ normal ≤ pressure_high < high."""
    wt = cfg.weather
    pressure = paired["pressure_mb"].to_numpy(dtype=np.float64)
    return np.where(
        pressure < wt.pressure_low,
        PRESSURE_LOW,
        np.where(pressure > wt.pressure_high, PRESSURE_HIGH, PRESSURE_NORMAL),
    )


def analyze_absolute_pressure(
    df: pd.DataFrame,
    cfg: MiaryConfig,
) -> Optional[AbsolutePressureAnalysis]:
    """Runs only with min_days_absolute_pressure paired days; otherwise None."""
    wt = cfg.weather
    paired = df.loc[df["pressure_mb"].notna()]

    if len(paired) < wt.min_days_absolute_pressure:
        logger.debug("Absolute pressure analysis skipped: %d paired days", len(paired))
        return None

    tiers = assign_pressure_tiers(paired, cfg)
    labels = pressure_tier_labels(wt.pressure_low, wt.pressure_high)
    buckets: Tuple[WeatherBucket, ...] = tuple(
        build_bucket(key, labels[key], paired.loc[tiers == key], cfg)
        for key in PRESSURE_TIER_ORDER
    )

    return AbsolutePressureAnalysis(
        enabled=True,
        confidence=determine_confidence(len(paired), cfg),
        buckets=buckets,
        notes=tuple(_small_bucket_notes(buckets, SMALL_TIER_NOTE, cfg)),
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def compute_weather_association(
    features: Sequence[WeatherDayFeature],
    cfg: MiaryConfig | None = None,
) -> WeatherAssociation:
    """Coverage, primary Δ24h analysis and secondary absolute-pressure analysis."""
    if cfg is None:
        cfg = DEFAULT_CONFIG

    df = features_to_frame(features)
    coverage = compute_weather_coverage(df, cfg)

    return WeatherAssociation(
        coverage=coverage,
        pressure_delta_24h=analyze_pressure_delta(df, coverage, cfg),
        absolute_pressure=analyze_absolute_pressure(df, cfg),
        disclaimer=WEATHER_DISCLAIMER,
    )
