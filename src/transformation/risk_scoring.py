"""
Risk Scoring - Transform Layer

Deterministic sub-scores for blood pressure, temperature and age, and the
per-patient composite risk score. Invalid inputs score 0.
"""

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Optional

from ..extract.schemas import PATIENT_ID_FIELD
from .vitals import ParsedVitals, parse_vitals

HIGH_RISK_THRESHOLD = 4
FEVER_THRESHOLD = 99.6


@dataclass(frozen=True)
class PatientRiskScore:
    patient_id: Any
    vitals: ParsedVitals
    bp_score: int
    temperature_score: int
    age_score: int

    @property
    def total_score(self) -> int:
        return self.bp_score + self.temperature_score + self.age_score

    @property
    def is_high_risk(self) -> bool:
        return self.total_score >= HIGH_RISK_THRESHOLD

    @property
    def has_fever(self) -> bool:
        return (
            self.vitals.temperature is not None
            and self.vitals.temperature >= FEVER_THRESHOLD
        )

    @property
    def has_data_quality_issue(self) -> bool:
        return self.vitals.has_data_quality_issue


def _systolic_band(systolic: float) -> int:
    if systolic >= 140:
        return 3  # Stage 2
    if systolic >= 130:
        return 2  # Stage 1
    if systolic >= 120:
        return 1  # Elevated
    return 0


def _diastolic_band(diastolic: float) -> int:
    if diastolic >= 90:
        return 3  # Stage 2
    if diastolic >= 80:
        return 2  # Stage 1
    return 0


def bp_score(systolic: Optional[float], diastolic: Optional[float]) -> int:
    """Blood pressure points: the more severe of the two readings' bands"""
    if systolic is None or diastolic is None:
        return 0
    return max(_systolic_band(systolic), _diastolic_band(diastolic))


def temperature_score(temperature: Optional[float]) -> int:
    if temperature is None:
        return 0
    if temperature >= 101.0:
        return 2
    if temperature >= 99.6:
        return 1
    return 0


def age_score(age: Optional[float]) -> int:
    if age is None:
        return 0
    if age > 65:
        return 2
    if age >= 40:
        return 1
    return 0


def score_patient(patient: Any) -> PatientRiskScore:
    """
    Score one raw patient record

    Args:
        patient: Raw record as returned by the API; may be malformed

    Returns:
        PatientRiskScore: Sub-scores, parsed vitals and derived flags
    """
    vitals = parse_vitals(patient)
    patient_id = (
        patient.get(PATIENT_ID_FIELD) if isinstance(patient, Mapping) else None
    )
    return PatientRiskScore(
        patient_id=patient_id,
        vitals=vitals,
        bp_score=bp_score(vitals.systolic, vitals.diastolic),
        temperature_score=temperature_score(vitals.temperature),
        age_score=age_score(vitals.age),
    )
