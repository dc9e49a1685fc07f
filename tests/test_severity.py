"""Tests for the severity summary and its inference guardrail."""

from miary.config import MiaryConfig, SeverityThresholds
from miary.models import Guardrail, SeverityDay
from miary.severity import SEGMENT_KEYS, compute_severity_summary, evaluate_guardrail

CFG = MiaryConfig()


def documented(n, level="moderate"):
    return [SeverityDay(documented=True, max_severity=level) for _ in range(n)]


def test_scenario_c_too_few_days():
    summary = compute_severity_summary(90, documented(5))
    assert summary.guardrail == Guardrail(ok=False, reason="TOO_FEW_DAYS")
    assert summary.documented_days == 5
    assert summary.days_for("moderate") == 5
    assert summary.days_for("undocumented") == 85
    assert summary.no_extrapolation is True


def test_no_data():
    summary = compute_severity_summary(30, [])
    assert summary.guardrail == Guardrail(ok=False, reason="NO_DATA")
    assert summary.days_for("undocumented") == 30


def test_enough_days_ok():
    days = [
        SeverityDay(documented=True, max_severity="severe" if i < 5 else "mild" if i < 15 else "none")
        for i in range(25)
    ]
    summary = compute_severity_summary(30, days)
    assert summary.guardrail.ok is True
    assert summary.guardrail.reason is None
    assert summary.documented_days == 25
    assert summary.days_for("severe") == 5
    assert summary.days_for("mild") == 10
    assert summary.days_for("none") == 10
    assert summary.days_for("undocumented") == 5


def test_guardrail_boundaries():
    assert evaluate_guardrail(0, CFG) == Guardrail(ok=False, reason="NO_DATA")
    assert evaluate_guardrail(1, CFG) == Guardrail(ok=False, reason="TOO_FEW_DAYS")
    assert evaluate_guardrail(19, CFG) == Guardrail(ok=False, reason="TOO_FEW_DAYS")
    assert evaluate_guardrail(20, CFG) == Guardrail(ok=True)


def test_null_severity_counts_as_undocumented():
    days = documented(20, "mild") + [SeverityDay(documented=True, max_severity=None)] * 5
    summary = compute_severity_summary(30, days)
    assert summary.documented_days == 20
    assert summary.guardrail.ok is True
    # 5 null days plus 5 days missing from the input
    assert summary.days_for("undocumented") == 10


def test_segments_fixed_order_and_total():
    summary = compute_severity_summary(40, documented(7, "severe"))
    assert tuple(s.key for s in summary.segments) == SEGMENT_KEYS
    assert sum(s.days for s in summary.segments) == 40


def test_no_projection_of_undocumented_days():
    summary = compute_severity_summary(90, documented(5, "severe"))
    assert summary.days_for("severe") == 5
    assert summary.days_for("mild") == 0
    assert summary.days_for("none") == 0


def test_configurable_minimum():
    cfg = MiaryConfig(severity=SeverityThresholds(min_days_for_inference=5))
    summary = compute_severity_summary(90, documented(5), cfg)
    assert summary.guardrail.ok is True
