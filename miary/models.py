"""
Immutable records passed between analysis stages.

Variants are string literals rather than classes: a risk level is just
"none", "possible" or "likely". Every record is a frozen dataclass and
every sequence inside one is a tuple.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple


RiskLevel = Literal["none", "possible", "likely"]
ConfidenceLevel = Literal["low", "medium", "high"]
GuardrailReason = Literal["TOO_FEW_DAYS", "NO_DATA"]
WeatherConfidence = Literal["high", "medium", "low", "insufficient"]
SeverityLevel = Literal["none", "mild", "moderate", "severe"]
SegmentKey = Literal["none", "mild", "moderate", "severe", "undocumented"]
WeatherSource = Literal["entry", "snapshot", "none"]
FindingCategory = Literal[
    "Core",
    "MOH",
    "Coverage",
    "Severity",
    "Weather",
    "Prophylaxis",
    "MedicationEffect",
    "Notes",
]


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DayRecord:
    """One calendar day of aggregated diary data."""

    documented: bool
    headache: bool
    pain_max: Optional[float] = None
    acute_med_used: bool = False
    triptan_used: bool = False


@dataclass(frozen=True)
class SeverityDay:
    """Max ME/CFS severity of one day. None means not documented for this module."""

    documented: bool
    max_severity: Optional[SeverityLevel] = None


@dataclass(frozen=True)
class WeatherDayFeature:
    """Diary outcome of one day joined with its weather signal."""

    date: str
    documented: bool
    pain_max: Optional[float] = None
    had_headache: bool = False
    had_acute_med: bool = False
    pressure_mb: Optional[float] = None
    pressure_change_24h: Optional[float] = None
    temperature_c: Optional[float] = None
    humidity: Optional[float] = None
    weather_coverage: WeatherSource = "none"


@dataclass(frozen=True)
class AnalysisRange:
    start_iso: str
    end_iso: str
    timezone: str
    total_days_in_range: int


# ---------------------------------------------------------------------------
# Core metrics & MOH
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoreMetrics:
    """Day-based KPIs. migraine_days is always None: no diagnostic flag exists."""

    days_in_range: int
    documented_days: int
    undocumented_days: int
    headache_days: int
    avg_pain_on_headache_days: Optional[float]
    median_pain_on_headache_days: Optional[float]
    max_pain: Optional[float]
    acute_med_days: int
    triptan_days: int
    total_intakes_acute: Optional[int] = None
    total_intakes_triptan: Optional[int] = None
    migraine_days: None = None


@dataclass(frozen=True)
class MOHTriggers:
    acute_med_days_per_30: float
    triptan_days_per_30: float
    acute_med_days_threshold: float
    triptan_days_threshold: float


@dataclass(frozen=True)
class MOHAssessment:
    risk_level: RiskLevel
    triggers: MOHTriggers
    rationale: str
    confidence: ConfidenceLevel


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoverageModule:
    available: int
    total: int
    ratio: float


@dataclass(frozen=True)
class CoverageWarning:
    module: str
    message: str
    ratio: float


@dataclass(frozen=True)
class ProphylaxisCoverage:
    injection_events_count: int
    cycles_in_range: int
    pre_window_coverage: Optional[float] = None
    post_window_coverage: Optional[float] = None


@dataclass(frozen=True)
class CoverageReport:
    diary: CoverageModule
    weather: Optional[CoverageModule]
    severity: Optional[CoverageModule]
    prophylaxis: Optional[ProphylaxisCoverage]
    warnings: Tuple[CoverageWarning, ...]


# ---------------------------------------------------------------------------
# Severity summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Guardrail:
    ok: bool
    reason: Optional[GuardrailReason] = None


@dataclass(frozen=True)
class SeveritySegment:
    key: SegmentKey
    days: int


@dataclass(frozen=True)
class SeveritySummary:
    segments: Tuple[SeveritySegment, ...]
    documented_days: int
    total_days_in_range: int
    guardrail: Guardrail
    no_extrapolation: bool = True

    def days_for(self, key: SegmentKey) -> int:
        """Day count of one segment (0 if the key is unknown)."""
        for segment in self.segments:
            if segment.key == key:
                return segment.days
        return 0


# ---------------------------------------------------------------------------
# Weather association
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherBucket:
    key: str
    label: str
    n_days: int
    headache_rate: float
    mean_pain_max: Optional[float]
    acute_med_rate: float


@dataclass(frozen=True)
class RelativeRisk:
    reference_label: str
    compare_label: str
    rr: Optional[float]
    abs_diff: Optional[float]


@dataclass(frozen=True)
class PressureDeltaAnalysis:
    enabled: bool
    confidence: WeatherConfidence
    buckets: Tuple[WeatherBucket, ...]
    relative_risk: Optional[RelativeRisk]
    notes: Tuple[str, ...]


@dataclass(frozen=True)
class AbsolutePressureAnalysis:
    enabled: bool
    confidence: WeatherConfidence
    buckets: Tuple[WeatherBucket, ...]
    notes: Tuple[str, ...]


@dataclass(frozen=True)
class WeatherCoverage:
    days_documented: int
    days_with_weather: int
    days_with_delta_24h: int
    ratio_weather: float
    ratio_delta_24h: float
    days_with_entry_weather: int = 0
    days_with_snapshot_weather: int = 0
    days_with_no_weather: int = 0


@dataclass(frozen=True)
class WeatherAssociation:
    coverage: WeatherCoverage
    pressure_delta_24h: PressureDeltaAnalysis
    absolute_pressure: Optional[AbsolutePressureAnalysis]
    disclaimer: str


# ---------------------------------------------------------------------------
# Findings & result bundle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FindingBasis:
    n_days: int
    coverage: float


@dataclass(frozen=True)
class Finding:
    """A templated claim built only from already-computed numbers."""

    id: str
    category: FindingCategory
    title: str
    statement: str
    metrics_used: Tuple[str, ...]
    basis: FindingBasis
    confidence: ConfidenceLevel
    limitations: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class NarrativeInsights:
    findings: Tuple[Finding, ...]
    do_not_do: Tuple[str, ...]


@dataclass(frozen=True)
class DefinitionRules:
    calendar_days_in_range: str
    documented_day: str
    headache_day: str
    acute_med_day: str
    triptan_day: str
    intake: str
    entry: str


@dataclass(frozen=True)
class AnalysisDefinitions:
    version: str
    rules: DefinitionRules
    note: str


@dataclass(frozen=True)
class AnalysisBasis:
    range: AnalysisRange
    documented_days: int
    diary_coverage: float
    weather_days: Optional[int]
    weather_coverage: Optional[float]
    severity_days_documented: Optional[int]
    severity_coverage: Optional[float]
    notes_days_with_any_text: Optional[int]


@dataclass(frozen=True)
class AnalysisResult:
    version: str
    definitions: AnalysisDefinitions
    basis: AnalysisBasis
    core_metrics: CoreMetrics
    moh: MOHAssessment
    coverage: CoverageReport
    severity: Optional[SeveritySummary]
    weather: Optional[WeatherAssociation]
    insights: NarrativeInsights
