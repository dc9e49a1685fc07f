"""Tests for the orchestrator, input loading and report generation."""

import copy
import json

import pytest

from miary import analysis_to_dict, analyze, analyze_data, build_analysis, generate_report
from miary.exceptions import InputDataError
from miary.models import AnalysisRange, DayRecord, SeverityDay, WeatherDayFeature


def make_range(total_days):
    return AnalysisRange(
        start_iso="2026-01-01",
        end_iso="2026-03-31",
        timezone="Europe/Berlin",
        total_days_in_range=total_days,
    )


def diary(n, headache=0, pain=6, acute=0, triptan=0):
    return [
        DayRecord(
            documented=True,
            headache=i < headache,
            pain_max=pain if i < headache else 0,
            acute_med_used=i < acute,
            triptan_used=i < triptan,
        )
        for i in range(n)
    ]


def weather(n, delta=0.0, headache=False):
    return [
        WeatherDayFeature(
            date=f"2026-01-{i + 1:02d}",
            documented=True,
            pain_max=7 if headache else 0,
            had_headache=headache,
            pressure_mb=1010.0,
            pressure_change_24h=delta,
            temperature_c=5.0,
            humidity=70.0,
            weather_coverage="entry",
        )
        for i in range(n)
    ]


def sample_input():
    return {
        "range": {"start": "2026-01-01", "end": "2026-03-31", "timezone": "Europe/Berlin"},
        "days": [
            {"documented": True, "headache": i < 20, "pain_max": 6 if i < 20 else None,
             "acute_med_used": i < 9, "triptan_used": i < 4}
            for i in range(60)
        ],
        "severity_days": [{"documented": True, "max_severity": "mild"} for _ in range(8)],
        "weather_features": [
            {"date": f"2026-01-{i + 1:02d}", "documented": True, "had_headache": i < 5,
             "pain_max": 5 if i < 5 else 0, "pressure_mb": 1012.0,
             "pressure_change_24h": -9.0 if i < 10 else 1.0, "weather_coverage": "entry"}
            for i in range(30)
        ],
        "notes_days_with_any_text": 12,
    }


# ═══════════════════════════════════════════════════════════════════════
# ORCHESTRATION
# ═══════════════════════════════════════════════════════════════════════

def test_minimal_input():
    analysis = build_analysis(make_range(90), diary(30, headache=15, acute=8, triptan=5))

    assert analysis.version == "2.0.0"
    assert analysis.definitions.version == "2.0.0"
    assert analysis.severity is None
    assert analysis.weather is None
    assert analysis.core_metrics.migraine_days is None
    assert len(analysis.insights.findings) >= 2
    assert len(analysis.insights.do_not_do) >= 3

    assert analysis.basis.range.total_days_in_range == 90
    assert analysis.basis.documented_days == 30
    assert analysis.basis.diary_coverage == 0.333
    assert analysis.basis.weather_days is None
    assert analysis.basis.severity_days_documented is None
    assert analysis.basis.notes_days_with_any_text is None


def test_with_severity_guardrail_and_moh():
    analysis = build_analysis(
        AnalysisRange("2026-01-01", "2026-01-30", "Europe/Berlin", 30),
        [DayRecord(documented=True, headache=True, pain_max=7, acute_med_used=True, triptan_used=True)] * 20,
        severity_days=[SeverityDay(documented=True, max_severity="moderate")] * 10,
    )
    assert analysis.severity is not None
    assert analysis.severity.guardrail.ok is False
    assert analysis.severity.guardrail.reason == "TOO_FEW_DAYS"
    assert analysis.moh.risk_level == "likely"
    assert analysis.coverage.severity.available == 10
    assert analysis.basis.severity_days_documented == 10
    assert analysis.basis.severity_coverage == 0.333

    finding_ids = [f.id for f in analysis.insights.findings]
    assert "moh_risk" in finding_ids
    assert "severity_guardrail" in finding_ids


def test_empty_weather_features_are_none():
    analysis = build_analysis(make_range(90), diary(60), weather_features=[])
    assert analysis.weather is None
    assert analysis.coverage.weather is None


def test_weather_days_available_derived_from_features():
    analysis = build_analysis(make_range(40), diary(40), weather_features=weather(40))
    assert analysis.coverage.weather.available == 40
    assert analysis.basis.weather_days == 40
    assert analysis.basis.weather_coverage == 1.0
    assert analysis.weather.pressure_delta_24h.enabled is True
    assert "weather_pressure_delta" in [f.id for f in analysis.insights.findings]


def test_explicit_weather_days_available_wins():
    analysis = build_analysis(
        make_range(90), diary(60), weather_features=weather(25), weather_days_available=30
    )
    assert analysis.coverage.weather.available == 30
    assert [w.module for w in analysis.coverage.warnings] == ["weather"]


def test_zero_range_returns_usable_result():
    analysis = build_analysis(make_range(0), [])
    assert analysis.core_metrics.documented_days == 0
    assert analysis.moh.confidence == "low"
    assert analysis.coverage.warnings == ()
    assert [f.id for f in analysis.insights.findings] == ["coverage_diary", "core_headache_summary"]


def test_prophylaxis_counts_pass_to_coverage():
    analysis = build_analysis(make_range(90), diary(60), prophylaxis_cycles_in_range=2)
    assert analysis.coverage.prophylaxis.cycles_in_range == 2
    assert analysis.coverage.prophylaxis.injection_events_count == 0


def test_idempotent():
    kwargs = dict(
        severity_days=[SeverityDay(documented=True, max_severity="severe")] * 25,
        weather_features=weather(20, -9.0, headache=True) + weather(30, 0.5),
        notes_days_with_any_text=4,
    )
    first = build_analysis(make_range(90), diary(60, headache=40, acute=15, triptan=12), **kwargs)
    second = build_analysis(make_range(90), diary(60, headache=40, acute=15, triptan=12), **kwargs)
    assert first == second
    assert analysis_to_dict(first) == analysis_to_dict(second)


def test_inputs_not_mutated():
    records = diary(60, headache=40, acute=15)
    features = weather(30, -4.0)
    before = (list(records), list(features))
    build_analysis(make_range(90), records, weather_features=features)
    assert (records, features) == before


# ═══════════════════════════════════════════════════════════════════════
# SERIALIZATION & REPORT
# ═══════════════════════════════════════════════════════════════════════

def test_analysis_to_dict_is_json_ready():
    analysis = build_analysis(make_range(90), diary(60, headache=40), weather_features=weather(30))
    data = analysis_to_dict(analysis)

    assert data["core_metrics"]["migraine_days"] is None
    assert isinstance(data["insights"]["findings"], list)
    assert isinstance(data["weather"]["pressure_delta_24h"]["buckets"], list)
    assert data["severity"] is None
    json.dumps(data)


def test_generate_report():
    analysis = build_analysis(
        make_range(90),
        diary(40, headache=20, acute=35),
        severity_days=[SeverityDay(documented=True, max_severity="mild")] * 3,
        weather_features=weather(25),
    )
    report = generate_report(analysis)
    assert "MIARY ANALYSIS REPORT" in report
    assert "MOH Risk" in report
    assert "Severity" in report
    assert f"{'mild':15s} : 3" in report
    assert f"{'undocumented':15s} : 87" in report
    assert "Pressure Δ24h" in report
    assert "Coverage Warnings" in report
    assert "not reported" in report


# ═══════════════════════════════════════════════════════════════════════
# INPUT LOADING
# ═══════════════════════════════════════════════════════════════════════

def test_analyze_data_derives_range_length():
    analysis = analyze_data(sample_input())
    assert analysis.basis.range.total_days_in_range == 90
    assert analysis.basis.range.timezone == "Europe/Berlin"
    assert analysis.core_metrics.documented_days == 60
    assert analysis.core_metrics.headache_days == 20
    assert analysis.core_metrics.avg_pain_on_headache_days == 6.0
    assert analysis.core_metrics.acute_med_days == 9
    assert analysis.severity.documented_days == 8
    assert analysis.weather.coverage.days_documented == 30
    assert analysis.basis.notes_days_with_any_text == 12


def test_analyze_data_explicit_total_days():
    data = sample_input()
    data["range"]["total_days"] = 60
    assert analyze_data(data).core_metrics.undocumented_days == 0


def test_analyze_data_does_not_mutate_input():
    data = sample_input()
    before = copy.deepcopy(data)
    analyze_data(data)
    assert data == before


def test_analyze_data_empty_raises():
    with pytest.raises(InputDataError, match="empty"):
        analyze_data({})


def test_analyze_data_missing_days_key():
    with pytest.raises(InputDataError) as exc_info:
        analyze_data({"range": {"start": "2026-01-01", "end": "2026-01-31"}})
    assert exc_info.value.missing == {"days"}


def test_analyze_data_missing_day_field():
    data = sample_input()
    data["days"] = [{"documented": True}]
    with pytest.raises(InputDataError, match="headache"):
        analyze_data(data)


def test_analyze_data_missing_range_field():
    data = sample_input()
    del data["range"]["end"]
    with pytest.raises(InputDataError, match="end"):
        analyze_data(data)


def test_analyze_data_missing_error_is_value_error():
    with pytest.raises(ValueError):
        analyze_data({"days": []})


def test_analyze_from_file(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps(sample_input()), encoding="utf-8")
    assert analyze(path) == analyze_data(sample_input())


def test_analyze_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        analyze(tmp_path / "missing.json")


def test_analyze_data_invalid_range_date():
    data = sample_input()
    data["range"]["start"] = "nope"
    with pytest.raises(InputDataError, match="Invalid range date"):
        analyze_data(data)


def test_analyze_data_null_range_date():
    data = sample_input()
    data["range"]["end"] = None
    with pytest.raises(InputDataError, match="Invalid range date"):
        analyze_data(data)
