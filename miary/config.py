"""
Centralized configuration for all thresholds and sample-size limits.

Every tunable constant lives here. Analysis functions take an optional
MiaryConfig and fall back to the defaults below.
"""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Core metrics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoreParams:
    """Rounding for pain statistics on headache days."""

    pain_digits: int = 1


# ---------------------------------------------------------------------------
# Medication overuse (MOH)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MOHThresholds:
    """Orientation thresholds for medication-overuse risk, per 30 days."""

    acute_med_days_per_month: float = 10.0
    triptan_days_per_month: float = 10.0

    # "possible" fires at this fraction of either threshold
    possible_fraction: float = 0.8

    normalization_days: int = 30
    per_30_digits: int = 1

    # Confidence drops to "medium" below either of these
    min_days_for_high_confidence: int = 28
    min_documented_ratio: float = 0.5

    def __post_init__(self):
        if not 0.0 < self.possible_fraction <= 1.0:
            raise ValueError(
                f"possible_fraction must be in (0, 1], got {self.possible_fraction}"
            )
        if self.normalization_days <= 0:
            raise ValueError(
                f"normalization_days must be positive, got {self.normalization_days}"
            )


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoverageThresholds:
    """Ratios below which a module's coverage is flagged."""

    low_diary: float = 0.6
    low_weather: float = 0.5
    ratio_digits: int = 3


# ---------------------------------------------------------------------------
# Severity (ME/CFS burden)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SeverityThresholds:
    """Minimum documented days before any severity statement is allowed."""

    min_days_for_inference: int = 20


# ---------------------------------------------------------------------------
# Weather association
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherThresholds:
    """
    Sample-size ladder and bucket boundaries for the pressure analysis.

    Confidence ladder over paired days n:
        n < min_days_for_statement   → insufficient
        n < medium_confidence_days   → low
        n < high_confidence_days     → medium
        otherwise                    → high
    """

    min_days_for_statement: int = 20
    medium_confidence_days: int = 30
    high_confidence_days: int = 60
    min_days_per_bucket: int = 5
    min_days_absolute_pressure: int = 60

    # Δ24h buckets (hPa): strong ≤ -8 < moderate ≤ -3 < stable/rise
    delta_strong_drop: float = -8.0
    delta_moderate_drop: float = -3.0

    # Absolute pressure tiers (hPa): low < 1005 ≤ normal ≤ 1025 < high
    pressure_low: float = 1005.0
    pressure_high: float = 1025.0

    low_delta_coverage: float = 0.5
    confounder_rate_spread: float = 0.2
    rate_digits: int = 2

    def __post_init__(self):
        if self.delta_strong_drop >= self.delta_moderate_drop:
            raise ValueError(
                "delta_strong_drop must be below delta_moderate_drop, got "
                f"{self.delta_strong_drop} >= {self.delta_moderate_drop}"
            )
        if self.pressure_low >= self.pressure_high:
            raise ValueError(
                f"pressure_low must be below pressure_high, got "
                f"{self.pressure_low} >= {self.pressure_high}"
            )
        ladder = (
            self.min_days_for_statement,
            self.medium_confidence_days,
            self.high_confidence_days,
        )
        if list(ladder) != sorted(ladder):
            raise ValueError(f"Confidence ladder must be ascending, got {ladder}")


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FindingThresholds:
    """Diary coverage ratios mapped to finding confidence."""

    high_coverage: float = 0.8
    medium_coverage: float = 0.6


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MiaryConfig:
    """Complete engine configuration. Pass to any analysis to override defaults."""

    core: CoreParams = field(default_factory=CoreParams)
    moh: MOHThresholds = field(default_factory=MOHThresholds)
    coverage: CoverageThresholds = field(default_factory=CoverageThresholds)
    severity: SeverityThresholds = field(default_factory=SeverityThresholds)
    weather: WeatherThresholds = field(default_factory=WeatherThresholds)
    findings: FindingThresholds = field(default_factory=FindingThresholds)


DEFAULT_CONFIG = MiaryConfig()
