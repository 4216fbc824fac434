"""
Vitals Parsing - Transform Layer

Pure parsers for the untrusted vital-sign fields of a patient record.
Each field parses independently; ``None`` marks an invalid value.
"""

import math
import re
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Optional, Tuple

from ..extract.schemas import AGE_FIELD, BLOOD_PRESSURE_FIELD, TEMPERATURE_FIELD

# Plain decimal notation only: no digit separators, hex, nan or inf
NUMERIC_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ParsedVitals:
    systolic: Optional[float]
    diastolic: Optional[float]
    temperature: Optional[float]
    age: Optional[float]

    @property
    def blood_pressure_valid(self) -> bool:
        return self.systolic is not None and self.diastolic is not None

    @property
    def has_data_quality_issue(self) -> bool:
        return (
            not self.blood_pressure_valid
            or self.temperature is None
            or self.age is None
        )


def parse_numeric(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None if it is not one"""
    # bool is an int subclass but never a measurement
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not NUMERIC_PATTERN.fullmatch(value):
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def parse_blood_pressure(value: Any) -> Optional[Tuple[float, float]]:
    """Parse ``"<systolic>/<diastolic>"``; anything else is invalid"""
    if not isinstance(value, str):
        return None
    parts = value.split("/")
    if len(parts) != 2:
        return None
    systolic = parse_numeric(parts[0])
    diastolic = parse_numeric(parts[1])
    if systolic is None or diastolic is None:
        return None
    return systolic, diastolic


def parse_vitals(patient: Any) -> ParsedVitals:
    """Parse the scored fields of one record; non-mappings are all-invalid"""
    if not isinstance(patient, Mapping):
        return ParsedVitals(None, None, None, None)

    bp = parse_blood_pressure(patient.get(BLOOD_PRESSURE_FIELD))
    systolic, diastolic = bp if bp is not None else (None, None)
    return ParsedVitals(
        systolic=systolic,
        diastolic=diastolic,
        temperature=parse_numeric(patient.get(TEMPERATURE_FIELD)),
        age=parse_numeric(patient.get(AGE_FIELD)),
    )
