"""
Findings: templated claims for the downstream narrative generator.

Each rule is a pure function that inspects already-computed results and
returns a Finding or None. Statements interpolate only numbers produced by
earlier stages and name the metric paths they used.
"""

from typing import List, Optional

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.definitions import DO_NOT_DO, STABLE_OR_RISE
from miary.models import (
    ConfidenceLevel,
    CoreMetrics,
    CoverageReport,
    Finding,
    FindingBasis,
    MOHAssessment,
    NarrativeInsights,
    SeveritySummary,
    WeatherAssociation,
)
from miary.stats import format_number, ratio, to_percent


def coverage_confidence(coverage_ratio: float, cfg: MiaryConfig) -> ConfidenceLevel:
    ft = cfg.findings
    if coverage_ratio >= ft.high_coverage:
        return "high"
    if coverage_ratio >= ft.medium_coverage:
        return "medium"
    return "low"


def _diary_basis(core: CoreMetrics, coverage: CoverageReport) -> FindingBasis:
    return FindingBasis(n_days=core.documented_days, coverage=coverage.diary.ratio)


def _diary_confidence(core: CoreMetrics, cfg: MiaryConfig) -> ConfidenceLevel:
    # Graded on the exact share, not the rounded coverage ratio.
    if core.days_in_range <= 0:
        return "low"
    return coverage_confidence(core.documented_days / core.days_in_range, cfg)


# ---------------------------------------------------------------------------
# Always emitted
# ---------------------------------------------------------------------------

def coverage_finding(core: CoreMetrics, coverage: CoverageReport, cfg: MiaryConfig) -> Finding:
    return Finding(
        id="coverage_diary",
        category="Coverage",
        title="Documentation coverage",
        statement=(
            f"{core.documented_days} of {core.days_in_range} days documented "
            f"({to_percent(coverage.diary.ratio)}%)."
        ),
        metrics_used=("core.documented_days", "core.days_in_range", "coverage.diary.ratio"),
        basis=_diary_basis(core, coverage),
        confidence=_diary_confidence(core, cfg),
    )


def core_summary_finding(core: CoreMetrics, coverage: CoverageReport, cfg: MiaryConfig) -> Finding:
    statement = f"{core.headache_days} headache days in {core.days_in_range} calendar days"
    if core.avg_pain_on_headache_days is not None:
        statement += (
            f" (mean intensity {format_number(core.avg_pain_on_headache_days)}, "
            f"max {format_number(core.max_pain)})."
        )
    else:
        statement += "."

    return Finding(
        id="core_headache_summary",
        category="Core",
        title="Headache days",
        statement=statement,
        metrics_used=(
            "core.headache_days",
            "core.days_in_range",
            "core.avg_pain_on_headache_days",
            "core.max_pain",
        ),
        basis=_diary_basis(core, coverage),
        confidence=_diary_confidence(core, cfg),
    )


# ---------------------------------------------------------------------------
# Conditional
# ---------------------------------------------------------------------------

def moh_finding(
    core: CoreMetrics,
    coverage: CoverageReport,
    moh: MOHAssessment,
) -> Optional[Finding]:
    """Only when the risk level is above none."""
    if moh.risk_level == "none":
        return None

    return Finding(
        id="moh_risk",
        category="MOH",
        title="Medication overuse risk",
        statement=moh.rationale,
        metrics_used=(
            "moh.triggers.acute_med_days_per_30",
            "moh.triggers.triptan_days_per_30",
            "core.acute_med_days",
            "core.triptan_days",
        ),
        basis=_diary_basis(core, coverage),
        confidence=moh.confidence,
    )


def severity_guardrail_finding(
    severity: Optional[SeveritySummary],
    cfg: MiaryConfig,
) -> Optional[Finding]:
    """Only when a severity summary exists and its guardrail blocks inference."""
    if severity is None or severity.guardrail.ok:
        return None

    if severity.guardrail.reason == "NO_DATA":
        statement = "No severity documentation in the range."
    else:
        statement = (
            f"Severity documented on only {severity.documented_days} days. At least "
            f"{cfg.severity.min_days_for_inference} days are recommended for a "
            "reliable evaluation."
        )

    return Finding(
        id="severity_guardrail",
        category="Severity",
        title="Severity data basis",
        statement=statement,
        metrics_used=("severity.documented_days", "severity.guardrail.reason"),
        basis=FindingBasis(
            n_days=severity.documented_days,
            coverage=ratio(
                severity.documented_days,
                severity.total_days_in_range,
                cfg.coverage.ratio_digits,
            ),
        ),
        confidence="low",
        limitations=("No projection when the data basis is insufficient.",),
    )


def weather_finding(
    weather: Optional[WeatherAssociation],
    cfg: MiaryConfig,
) -> Optional[Finding]:
    """Only when the Δ24h analysis is enabled."""
    if weather is None or not weather.pressure_delta_24h.enabled:
        return None

    delta = weather.pressure_delta_24h
    minimum = cfg.weather.min_days_per_bucket

    stable = next((b for b in delta.buckets if b.key == STABLE_OR_RISE), None)
    drops = [b for b in delta.buckets if b.key != STABLE_OR_RISE and b.n_days >= minimum]
    strongest_drop = drops[0] if drops else None

    statement = (
        f"Weather-headache association based on {weather.coverage.days_with_delta_24h} "
        "days with Δ24h data."
    )
    if strongest_drop is not None and stable is not None and stable.n_days >= minimum:
        statement += (
            f" {strongest_drop.label}: headache rate {to_percent(strongest_drop.headache_rate)}% "
            f"vs. {to_percent(stable.headache_rate)}% with stable pressure."
        )
    if delta.relative_risk is not None and delta.relative_risk.rr is not None:
        statement += f" Relative risk: {format_number(delta.relative_risk.rr)}×."

    if delta.confidence in ("high", "medium"):
        confidence: ConfidenceLevel = delta.confidence
    else:
        confidence = "low"

    return Finding(
        id="weather_pressure_delta",
        category="Weather",
        title="Air pressure & headache",
        statement=statement,
        metrics_used=(
            "weather.coverage.days_with_delta_24h",
            "weather.pressure_delta_24h.buckets",
            "weather.pressure_delta_24h.relative_risk",
        ),
        basis=FindingBasis(
            n_days=weather.coverage.days_with_delta_24h,
            coverage=weather.coverage.ratio_delta_24h,
        ),
        confidence=confidence,
        limitations=(weather.disclaimer,) + delta.notes,
    )


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def build_insights(
    core: CoreMetrics,
    moh: MOHAssessment,
    coverage: CoverageReport,
    severity: Optional[SeveritySummary],
    weather: Optional[WeatherAssociation],
    cfg: MiaryConfig | None = None,
) -> NarrativeInsights:
    """Findings in fixed order plus the invariant do-not-do list."""
    if cfg is None:
        cfg = DEFAULT_CONFIG

    findings: List[Finding] = [
        coverage_finding(core, coverage, cfg),
        core_summary_finding(core, coverage, cfg),
    ]

    for finding in (
        moh_finding(core, coverage, moh),
        severity_guardrail_finding(severity, cfg),
        weather_finding(weather, cfg),
    ):
        if finding is not None:
            findings.append(finding)

    return NarrativeInsights(findings=tuple(findings), do_not_do=DO_NOT_DO)
