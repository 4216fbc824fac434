"""
Transformation Layer Schemas

Schema of the per-patient risk report built from scored records.
"""

import polars as pl

RISK_FRAME_SCHEMA = pl.Schema(
    [
        ("patient_id", pl.String()),
        ("systolic", pl.Float64()),
        ("diastolic", pl.Float64()),
        ("temperature", pl.Float64()),
        ("age", pl.Float64()),
        ("bp_score", pl.Int64()),
        ("temperature_score", pl.Int64()),
        ("age_score", pl.Int64()),
        ("total_score", pl.Int64()),
        ("is_high_risk", pl.Boolean()),
        ("has_fever", pl.Boolean()),
        ("has_data_quality_issue", pl.Boolean()),
    ]
)
