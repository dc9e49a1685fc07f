"""
Fixed text shipped with every analysis: counting rules, templates, labels.

Nothing here is computed. Templates only receive numbers that an analysis
stage has already produced.
"""

from typing import Dict, Tuple

from miary.models import AnalysisDefinitions, DefinitionRules


ANALYSIS_VERSION = "2.0.0"


# ---------------------------------------------------------------------------
# Counting rules (transparency for clinicians)
# ---------------------------------------------------------------------------

ANALYSIS_DEFINITIONS = AnalysisDefinitions(
    version=ANALYSIS_VERSION,
    rules=DefinitionRules(
        calendar_days_in_range=(
            "All calendar days from start to end date inclusive, "
            "whether or not anything was documented."
        ),
        documented_day=(
            "A calendar day with at least one diary entry, including "
            "entries that record no pain."
        ),
        headache_day="A documented day with a recorded pain intensity above 0.",
        acute_med_day=(
            "A documented day with at least one intake of an acute "
            "medication, counted once regardless of the number of intakes."
        ),
        triptan_day=(
            "A documented day with at least one triptan intake, counted "
            "once regardless of the number of intakes."
        ),
        intake="A single recorded medication intake. Several intakes can fall on one day.",
        entry="A single diary record. Several entries can fall on one day.",
    ),
    note=(
        "All core metrics are day-based. Migraine days are not reported "
        "because the diary contains no diagnostic migraine flag."
    ),
)


# ---------------------------------------------------------------------------
# MOH rationale templates (orientation, never diagnosis)
# ---------------------------------------------------------------------------

MOH_RATIONALE: Dict[str, str] = {
    "none": (
        "Acute medication on {acute} days and triptans on {triptan} days per "
        "30 days, below the orientation thresholds of {acute_threshold} and "
        "{triptan_threshold} days per month."
    ),
    "possible": (
        "Acute medication on {acute} days and triptans on {triptan} days per "
        "30 days, approaching the orientation thresholds of {acute_threshold} "
        "and {triptan_threshold} days per month. Orientation note, not a diagnosis."
    ),
    "likely": (
        "Acute medication on {acute} days and triptans on {triptan} days per "
        "30 days, at or above the orientation thresholds of {acute_threshold} "
        "and {triptan_threshold} days per month. Orientation note, not a "
        "diagnosis; suitable for discussion with the treating physician."
    ),
}


# ---------------------------------------------------------------------------
# Coverage warnings
# ---------------------------------------------------------------------------

DIARY_COVERAGE_WARNING = (
    "Only {available} of {total} days documented ({percent}%). "
    "Limited significance."
)
WEATHER_COVERAGE_WARNING = (
    "Weather data available for only {available} of {total} days. "
    "Weather analysis limited."
)


# ---------------------------------------------------------------------------
# Weather labels and notes
# ---------------------------------------------------------------------------

WEATHER_DISCLAIMER = (
    "Orientation note based on your documentation. "
    "Association is not causation. No diagnosis."
)

STRONG_DROP = "strong_drop"
MODERATE_DROP = "moderate_drop"
STABLE_OR_RISE = "stable_or_rise"

PRESSURE_LOW = "low"
PRESSURE_NORMAL = "normal"
PRESSURE_HIGH = "high"


def delta_bucket_labels(strong: float, moderate: float) -> Dict[str, str]:
    """Labels for the Δ24h buckets, rendered from the configured boundaries."""
    return {
        STRONG_DROP: f"Strong drop (≤ {strong:g} hPa)",
        MODERATE_DROP: f"Moderate drop ({strong:g} to {moderate:g} hPa)",
        STABLE_OR_RISE: f"Stable / rise (> {moderate:g} hPa)",
    }


def pressure_tier_labels(low: float, high: float) -> Dict[str, str]:
    """Labels for the absolute-pressure tiers."""
    return {
        PRESSURE_LOW: f"Low pressure (< {low:g} hPa)",
        PRESSURE_NORMAL: f"Normal ({low:g}–{high:g} hPa)",
        PRESSURE_HIGH: f"High pressure (> {high:g} hPa)",
    }


NO_DELTA_NOTE = "No Δ24h data available."
TOO_FEW_DELTA_NOTE = "Only {n} days with Δ24h data. At least {minimum} required."
SMALL_BUCKET_NOTE = "{label}: only {n} days (< {minimum}), limited significance."
SMALL_TIER_NOTE = "{label}: only {n} days, limited significance."
LOW_DELTA_COVERAGE_NOTE = (
    "Δ24h is currently available for only part of the days. "
    "Significance may be limited."
)
CONFOUNDER_NOTE = (
    "Acute medication rate varies between pressure groups. "
    "Medication can influence pain intensity."
)


# ---------------------------------------------------------------------------
# Narrative guardrails
# ---------------------------------------------------------------------------

DO_NOT_DO: Tuple[str, ...] = (
    "Do not recalculate any counts from raw data; use only the provided metrics.",
    "Do not extrapolate severity when guardrail.ok is false.",
    "Do not claim weather causality; only associations with stated confidence.",
    "Do not invent statistics; use only the pre-computed buckets, ratios and relative risk values.",
    "Do not infer migraine days; migraine_days is None because no diagnostic flag exists.",
    "Do not use alarmist language; phrase results as orientation notes, not diagnoses.",
)
