"""
MIARY v2.0 — Deterministic Clinical Analysis Engine

Turns per-day headache-diary aggregates into physician-facing metrics.
Identical input always yields identical output.

Architecture:
    config       — All thresholds and sample-size limits (single source of truth)
    definitions  — Counting rules, templates, labels, do-not-do list
    models       — Immutable records passed between stages
    stats        — Rounding and ratio primitives
    metrics      — Day-based core KPIs
    moh          — Medication-overuse risk classification
    coverage     — Documentation coverage per module
    severity     — Severity segmentation with inference guardrail
    weather      — Pressure/headache association with relative risk
    findings     — Templated findings for narrative generation
    pipeline     — Orchestration: core → MOH → coverage → severity → weather → findings

Public API:
    build_analysis(range_, days, ...) → pure orchestration over typed records
    analyze_data(data)                → UI / backend mode (JSON-shaped dict)
    analyze(filepath)                 → CLI mode
    generate_report(result)           → formatted report
"""

from miary.pipeline import (
    analysis_to_dict,
    analyze,
    analyze_data,
    build_analysis,
    generate_report,
)

__version__ = "2.0.0"

__all__ = [
    "analysis_to_dict",
    "analyze",
    "analyze_data",
    "build_analysis",
    "generate_report",
]
