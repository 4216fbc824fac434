"""
Risk Report Transformers - Transform Layer

Pure functions that turn scored patients into a tabular risk report and
summary statistics for logging.
"""

import logging
from typing import Any, Dict, Iterable

import polars as pl

from .risk_scoring import PatientRiskScore
from .schemas import RISK_FRAME_SCHEMA

logger = logging.getLogger(__name__)


def build_risk_frame(scores: Iterable[PatientRiskScore]) -> pl.DataFrame:
    """
    Create the per-patient risk report

    Args:
        scores: Scored patients

    Returns:
        pl.DataFrame: One row per patient with RISK_FRAME_SCHEMA
    """
    rows = [
        {
            "patient_id": None if s.patient_id is None else str(s.patient_id),
            "systolic": s.vitals.systolic,
            "diastolic": s.vitals.diastolic,
            "temperature": s.vitals.temperature,
            "age": s.vitals.age,
            "bp_score": s.bp_score,
            "temperature_score": s.temperature_score,
            "age_score": s.age_score,
            "total_score": s.total_score,
            "is_high_risk": s.is_high_risk,
            "has_fever": s.has_fever,
            "has_data_quality_issue": s.has_data_quality_issue,
        }
        for s in scores
    ]
    return pl.DataFrame(rows, schema=RISK_FRAME_SCHEMA)


def get_summary_stats(df: pl.DataFrame) -> Dict[str, Any]:
    """
    Get summary statistics for a risk report

    Args:
        df: DataFrame with RISK_FRAME_SCHEMA

    Returns:
        Dict: Summary statistics
    """
    if df.schema != RISK_FRAME_SCHEMA:
        raise ValueError(
            f"Schema mismatch: expected {RISK_FRAME_SCHEMA}, got {df.schema}"
        )

    if df.is_empty():
        return {
            "total_patients": 0,
            "unique_patient_ids": 0,
            "high_risk_rows": 0,
            "fever_rows": 0,
            "data_quality_rows": 0,
            "total_score_mean": None,
            "total_score_max": None,
        }

    stats = {
        "total_patients": df.height,
        "unique_patient_ids": df.select("patient_id").n_unique(),
        "high_risk_rows": df.select(pl.col("is_high_risk").sum()).item(),
        "fever_rows": df.select(pl.col("has_fever").sum()).item(),
        "data_quality_rows": df.select(pl.col("has_data_quality_issue").sum()).item(),
        "total_score_mean": df.select(pl.col("total_score").mean()).item(),
        "total_score_max": df.select(pl.col("total_score").max()).item(),
    }

    logger.info(f"Generated summary stats: {list(stats.keys())}")
    return stats
