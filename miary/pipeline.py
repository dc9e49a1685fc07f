"""
Pipeline orchestration: core → MOH → coverage → severity → weather → findings.

build_analysis is a pure function over typed records. The loaders around it
(analyze, analyze_data) are the only code that validates raw input, and
generate_report the only code that formats text.
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from miary.config import DEFAULT_CONFIG, MiaryConfig
from miary.coverage import compute_coverage
from miary.definitions import ANALYSIS_DEFINITIONS, ANALYSIS_VERSION
from miary.exceptions import InputDataError
from miary.findings import build_insights
from miary.metrics import DAY_COLUMNS, compute_core_metrics
from miary.models import (
    AnalysisBasis,
    AnalysisRange,
    AnalysisResult,
    DayRecord,
    SeverityDay,
    WeatherDayFeature,
)
from miary.moh import compute_moh
from miary.severity import SEGMENT_KEYS, compute_severity_summary
from miary.stats import format_number
from miary.weather import FEATURE_COLUMNS, compute_weather_association


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Core analysis (PURE FUNCTION — NO FILE I/O)
# ---------------------------------------------------------------------------

def build_analysis(
    range_: AnalysisRange,
    days: Sequence[DayRecord],
    *,
    total_intakes_acute: Optional[int] = None,
    total_intakes_triptan: Optional[int] = None,
    severity_days: Optional[Sequence[SeverityDay]] = None,
    weather_features: Optional[Sequence[WeatherDayFeature]] = None,
    weather_days_available: Optional[int] = None,
    notes_days_with_any_text: Optional[int] = None,
    prophylaxis_injection_events: Optional[int] = None,
    prophylaxis_cycles_in_range: Optional[int] = None,
    cfg: MiaryConfig | None = None,
) -> AnalysisResult:
    """
    Assemble the full analysis from already-aggregated day data.

    Stateless. No file reads. Optional modules that are None stay None in
    the result; they never raise.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG
    total_days = range_.total_days_in_range

    # Stage 1: Core metrics
    core = compute_core_metrics(
        total_days,
        days,
        total_intakes_acute=total_intakes_acute,
        total_intakes_triptan=total_intakes_triptan,
        cfg=cfg,
    )

    # Stage 2: MOH
    moh = compute_moh(core, cfg)

    # Stage 3: Coverage
    if weather_days_available is None and weather_features:
        weather_days_available = sum(
            1 for f in weather_features
            if f.documented and (f.pressure_mb is not None or f.temperature_c is not None)
        )
    severity_days_documented = (
        sum(1 for d in severity_days if d.max_severity is not None)
        if severity_days is not None
        else None
    )
    coverage = compute_coverage(
        total_days,
        core.documented_days,
        weather_days_available=weather_days_available,
        severity_days_documented=severity_days_documented,
        prophylaxis_injection_events=prophylaxis_injection_events,
        prophylaxis_cycles_in_range=prophylaxis_cycles_in_range,
        cfg=cfg,
    )

    # Stage 4: Severity (only with input)
    severity = (
        compute_severity_summary(total_days, severity_days, cfg)
        if severity_days is not None
        else None
    )

    # Stage 5: Weather (only with non-empty input)
    weather = (
        compute_weather_association(weather_features, cfg)
        if weather_features
        else None
    )

    # Stage 6: Findings
    insights = build_insights(core, moh, coverage, severity, weather, cfg)

    logger.debug(
        "Analysis built: %d days, %d documented, MOH %s, %d findings",
        total_days, core.documented_days, moh.risk_level, len(insights.findings),
    )

    return AnalysisResult(
        version=ANALYSIS_VERSION,
        definitions=ANALYSIS_DEFINITIONS,
        basis=AnalysisBasis(
            range=range_,
            documented_days=core.documented_days,
            diary_coverage=coverage.diary.ratio,
            weather_days=weather_days_available,
            weather_coverage=coverage.weather.ratio if coverage.weather else None,
            severity_days_documented=severity.documented_days if severity else None,
            severity_coverage=coverage.severity.ratio if coverage.severity else None,
            notes_days_with_any_text=notes_days_with_any_text,
        ),
        core_metrics=core,
        moh=moh,
        coverage=coverage,
        severity=severity,
        weather=weather,
        insights=insights,
    )


def analysis_to_dict(result: AnalysisResult) -> Dict:
    """JSON-ready dict of the result (tuples become lists)."""
    return json.loads(json.dumps(asdict(result), ensure_ascii=False))


# ---------------------------------------------------------------------------
# Input loading (dict / JSON file)
# ---------------------------------------------------------------------------

REQUIRED_RANGE_KEYS = {"start", "end"}
REQUIRED_DAY_COLUMNS = {"documented", "headache"}
REQUIRED_SEVERITY_COLUMNS = {"max_severity"}
REQUIRED_WEATHER_COLUMNS = {"date", "documented"}


def _frame_records(
    rows: List[Dict],
    columns: Sequence[str],
    required: set,
    what: str,
) -> List[Dict]:
    """Validate a list of row dicts and fill optional columns with None."""
    df = pd.DataFrame(rows)
    missing = required - set(df.columns)
    if rows and missing:
        raise InputDataError(f"Missing required {what} fields: {sorted(missing)}", missing=missing)

    df = df.reindex(columns=list(columns))
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def _parse_range(raw: Dict) -> AnalysisRange:
    missing = REQUIRED_RANGE_KEYS - set(raw)
    if missing:
        raise InputDataError(f"Missing required range fields: {sorted(missing)}", missing=missing)

    try:
        start = pd.Timestamp(raw["start"])
        end = pd.Timestamp(raw["end"])
    except (TypeError, ValueError) as e:
        raise InputDataError(f"Invalid range date: {e}") from e
    if pd.isna(start) or pd.isna(end):
        raise InputDataError("Invalid range date: start and end must be set")

    total_days = raw.get("total_days")
    if total_days is None:
        total_days = max(0, (end.normalize() - start.normalize()).days + 1)

    return AnalysisRange(
        start_iso=start.date().isoformat(),
        end_iso=end.date().isoformat(),
        timezone=raw.get("timezone", "UTC"),
        total_days_in_range=int(total_days),
    )


def _day_records(rows: List[Dict]) -> List[DayRecord]:
    records = _frame_records(rows, DAY_COLUMNS, REQUIRED_DAY_COLUMNS, "day")
    return [
        DayRecord(
            documented=bool(r["documented"]),
            headache=bool(r["headache"]),
            pain_max=r["pain_max"],
            acute_med_used=bool(r["acute_med_used"]),
            triptan_used=bool(r["triptan_used"]),
        )
        for r in records
    ]


def _severity_days(rows: List[Dict]) -> List[SeverityDay]:
    records = _frame_records(
        rows, ("documented", "max_severity"), REQUIRED_SEVERITY_COLUMNS, "severity"
    )
    days = []
    for r in records:
        documented = r["documented"]
        if documented is None:
            documented = r["max_severity"] is not None
        days.append(SeverityDay(documented=bool(documented), max_severity=r["max_severity"]))
    return days


def _weather_features(rows: List[Dict]) -> List[WeatherDayFeature]:
    records = _frame_records(rows, FEATURE_COLUMNS, REQUIRED_WEATHER_COLUMNS, "weather")
    return [
        WeatherDayFeature(
            date=str(r["date"]),
            documented=bool(r["documented"]),
            pain_max=r["pain_max"],
            had_headache=bool(r["had_headache"]),
            had_acute_med=bool(r["had_acute_med"]),
            pressure_mb=r["pressure_mb"],
            pressure_change_24h=r["pressure_change_24h"],
            temperature_c=r["temperature_c"],
            humidity=r["humidity"],
            weather_coverage=r["weather_coverage"] or "none",
        )
        for r in records
    ]


def analyze_data(
    data: Dict,
    cfg: MiaryConfig | None = None,
) -> AnalysisResult:
    """
    Backend / UI integration entry point.

    Accepts the JSON-shaped dict directly. No file system usage.
    """
    if not data:
        raise InputDataError("Input data cannot be empty")

    missing = {"range", "days"} - set(data)
    if missing:
        raise InputDataError(f"Missing required keys: {sorted(missing)}", missing=missing)

    severity_rows = data.get("severity_days")
    weather_rows = data.get("weather_features")

    return build_analysis(
        _parse_range(data["range"]),
        _day_records(data["days"]),
        total_intakes_acute=data.get("total_intakes_acute"),
        total_intakes_triptan=data.get("total_intakes_triptan"),
        severity_days=_severity_days(severity_rows) if severity_rows is not None else None,
        weather_features=_weather_features(weather_rows) if weather_rows is not None else None,
        weather_days_available=data.get("weather_days_available"),
        notes_days_with_any_text=data.get("notes_days_with_any_text"),
        prophylaxis_injection_events=data.get("prophylaxis_injection_events"),
        prophylaxis_cycles_in_range=data.get("prophylaxis_cycles_in_range"),
        cfg=cfg,
    )


def load_data(filepath: Union[str, Path]) -> Dict:
    """Load analysis input from a JSON file."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InputDataError(f"Data file is not valid JSON: {e}") from e

    if not data:
        raise InputDataError("Data file is empty")

    logger.debug("Loaded %s", path)
    return data


def analyze(
    filepath: Union[str, Path],
    cfg: MiaryConfig | None = None,
) -> AnalysisResult:
    """
    CLI-compatible entry point.
    Reads JSON file and runs analysis.
    """
    return analyze_data(load_data(filepath), cfg)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _fmt(value) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def generate_report(result: AnalysisResult) -> str:
    """Format the analysis result as a human-readable text report."""
    core = result.core_metrics
    moh = result.moh
    rng = result.basis.range

    lines = [
        "MIARY ANALYSIS REPORT",
        "=" * 58,
        "",
        f"  Range               : {rng.start_iso} – {rng.end_iso} ({rng.timezone})",
        f"  Calendar Days       : {core.days_in_range}",
        f"  Documented Days     : {core.documented_days} ({_fmt(result.coverage.diary.ratio)})",
        f"  Headache Days       : {core.headache_days}",
        f"  Pain (mean / median): {_fmt(core.avg_pain_on_headache_days)} / {_fmt(core.median_pain_on_headache_days)}",
        f"  Max Pain            : {_fmt(core.max_pain)}",
        f"  Acute Med Days      : {core.acute_med_days}",
        f"  Triptan Days        : {core.triptan_days}",
        "  Migraine Days       : not reported (no diagnostic flag)",
        "",
        f"  MOH Risk            : {moh.risk_level} (confidence: {moh.confidence})",
        f"    per 30 days       : acute {_fmt(moh.triggers.acute_med_days_per_30)}"
        f" | triptan {_fmt(moh.triggers.triptan_days_per_30)}",
    ]

    if result.severity is not None:
        sev = result.severity
        guard = "ok" if sev.guardrail.ok else sev.guardrail.reason
        lines.append("")
        lines.append(f"  Severity            : {sev.documented_days} documented days (guardrail: {guard})")
        for key in SEGMENT_KEYS:
            lines.append(f"    {key:15s} : {sev.days_for(key)}")

    if result.weather is not None:
        delta = result.weather.pressure_delta_24h
        lines.append("")
        lines.append(
            f"  Pressure Δ24h       : {'enabled' if delta.enabled else 'disabled'}"
            f" (confidence: {delta.confidence})"
        )
        for b in delta.buckets:
            lines.append(
                f"    {b.label:32s} : n={b.n_days:3d}  headache {_fmt(b.headache_rate)}"
                f"  acute {_fmt(b.acute_med_rate)}  pain {_fmt(b.mean_pain_max)}"
            )
        if delta.relative_risk is not None:
            lines.append(
                f"    Relative Risk     : {_fmt(delta.relative_risk.rr)}"
                f" (abs diff {_fmt(delta.relative_risk.abs_diff)})"
            )

    if result.coverage.warnings:
        lines.append("")
        lines.append("  Coverage Warnings:")
        for warning in result.coverage.warnings:
            lines.append(f"    - [{warning.module}] {warning.message}")

    lines.append("")
    lines.append("  Findings:")
    for finding in result.insights.findings:
        lines.append(f"    - {finding.title}: {finding.statement}")

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
