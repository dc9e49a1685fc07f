"""
Coverage auditing: how much of the range each module actually documents.

A module whose availability is unknown (None) is reported as None and never
warned about. Only measured insufficiency produces a warning.
"""

from typing import List, Optional

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.definitions import DIARY_COVERAGE_WARNING, WEATHER_COVERAGE_WARNING
from miary.models import (
    CoverageModule,
    CoverageReport,
    CoverageWarning,
    ProphylaxisCoverage,
)
from miary.stats import ratio, to_percent


def build_module(available: int, total: int, cfg: MiaryConfig) -> CoverageModule:
    """available / total as a ratio in [0, 1]; 0 when total is 0."""
    return CoverageModule(
        available=available,
        total=total,
        ratio=ratio(available, total, cfg.coverage.ratio_digits),
    )


def compute_coverage(
    days_in_range: int,
    documented_days: int,
    weather_days_available: Optional[int] = None,
    severity_days_documented: Optional[int] = None,
    prophylaxis_injection_events: Optional[int] = None,
    prophylaxis_cycles_in_range: Optional[int] = None,
    cfg: MiaryConfig | None = None,
) -> CoverageReport:
    """Build per-module coverage and the warnings list."""
    if cfg is None:
        cfg = DEFAULT_CONFIG
    ct = cfg.coverage
    warnings: List[CoverageWarning] = []

    # -- Diary (always present) ----------------------------------------------

    diary = build_module(documented_days, days_in_range, cfg)
    if diary.ratio < ct.low_diary and days_in_range > 0:
        warnings.append(CoverageWarning(
            module="diary",
            message=DIARY_COVERAGE_WARNING.format(
                available=documented_days,
                total=days_in_range,
                percent=to_percent(diary.ratio),
            ),
            ratio=diary.ratio,
        ))

    # -- Weather ---------------------------------------------------------------

    weather = None
    if weather_days_available is not None:
        weather = build_module(weather_days_available, days_in_range, cfg)
        if weather.ratio < ct.low_weather and days_in_range > 0:
            warnings.append(CoverageWarning(
                module="weather",
                message=WEATHER_COVERAGE_WARNING.format(
                    available=weather_days_available,
                    total=days_in_range,
                ),
                ratio=weather.ratio,
            ))

    # -- Severity --------------------------------------------------------------

    severity = None
    if severity_days_documented is not None:
        severity = build_module(severity_days_documented, days_in_range, cfg)

    # -- Prophylaxis -----------------------------------------------------------

    prophylaxis = None
    if prophylaxis_injection_events is not None or prophylaxis_cycles_in_range is not None:
        prophylaxis = ProphylaxisCoverage(
            injection_events_count=prophylaxis_injection_events or 0,
            cycles_in_range=prophylaxis_cycles_in_range or 0,
        )

    return CoverageReport(
        diary=diary,
        weather=weather,
        severity=severity,
        prophylaxis=prophylaxis,
        warnings=tuple(warnings),
    )
