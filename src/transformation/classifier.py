"""
Alert Classifier - Transform Layer

Pure, deterministic classification of the full patient population into
high-risk, fever and data-quality alert sets. Malformed records never raise;
they are flagged as data-quality issues instead.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set

from ..extract.schemas import ALERT_SET_KEYS
from .risk_scoring import PatientRiskScore, score_patient

logger = logging.getLogger(__name__)


@dataclass
class AlertSets:
    high_risk_patients: Set[Any] = field(default_factory=set)
    fever_patients: Set[Any] = field(default_factory=set)
    data_quality_issues: Set[Any] = field(default_factory=set)

    def add(self, score: PatientRiskScore):
        """Record one scored patient in every set it qualifies for"""
        key = patient_key(score.patient_id)
        if score.is_high_risk:
            self.high_risk_patients.add(key)
        if score.has_fever:
            self.fever_patients.add(key)
        if score.has_data_quality_issue:
            self.data_quality_issues.add(key)

    def counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in ALERT_SET_KEYS}

    def to_payload(self) -> Dict[str, List[str]]:
        """JSON-ready body for the submission endpoint, in stable order

        Ids go out as strings; records without an id cannot be referenced
        upstream and are left out.
        """
        return {
            name: sorted({str(pid) for pid in getattr(self, name) if pid is not None})
            for name in ALERT_SET_KEYS
        }


def patient_key(patient_id: Any) -> Any:
    """Set key for an identifier; unhashable ids are keyed by their text"""
    try:
        hash(patient_id)
    except TypeError:
        return str(patient_id)
    return patient_id


def score_patients(patients: Iterable[Any]) -> List[PatientRiskScore]:
    return [score_patient(patient) for patient in patients]


def classify_scores(scores: Iterable[PatientRiskScore]) -> AlertSets:
    alert_sets = AlertSets()
    for score in scores:
        alert_sets.add(score)
    return alert_sets


def classify(patients: Iterable[Any]) -> AlertSets:
    """
    Classify patients into alert sets

    Args:
        patients: Raw patient records, including malformed entries

    Returns:
        AlertSets: Freshly built sets of patient identifiers
    """
    alert_sets = classify_scores(score_patients(patients))
    logger.info(f"Classified patients: {alert_sets.counts()}")
    return alert_sets
