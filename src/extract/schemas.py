"""
Extract Layer Schemas

Field names of the raw patient records returned by the patients API.
Records are untrusted: any field may be missing or malformed.
"""

PATIENT_ID_FIELD = "patient_id"

# Fields that feed the risk score
BLOOD_PRESSURE_FIELD = "blood_pressure"
TEMPERATURE_FIELD = "temperature"
AGE_FIELD = "age"

# Keys of the alert sets sent to the submission endpoint
ALERT_SET_KEYS = ("high_risk_patients", "fever_patients", "data_quality_issues")
