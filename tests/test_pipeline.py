"""
Unit Tests for the Assessment Pipeline

Tests the host-facing operations:
- run_assessment() fetches, classifies and stores the result
- a failed acquisition leaves the stored result untouched
- submit_last_result() requires a prior result and passes responses through
"""

import logging
import os
import sys
from unittest.mock import Mock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import requests

from src.coreutils.env import AssessmentConfig
from src.extract.errors import FetchError, FetchErrorKind
from src.extract.patients_api import PatientsAPIClient
from src.load.assessment_submitter import SubmissionError
from src.load.result_store import LastResultStore, NoPriorResultError
from src.orchestration.pipeline import (
    AcquisitionError,
    AssessmentPipeline,
    create_pipeline,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

PATIENTS = [
    {"patient_id": "DEMO001", "age": 70, "temperature": 101.0, "blood_pressure": "150/95"},
    {"patient_id": "DEMO002", "age": 30, "temperature": 98.2, "blood_pressure": "INVALID"},
]


def make_response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response


def make_pipeline(get_responses=(), post_response=None):
    session = Mock()
    session.get.side_effect = list(get_responses)
    if isinstance(post_response, Exception):
        session.post.side_effect = post_response
    else:
        session.post.return_value = post_response
    client = PatientsAPIClient(
        "test-key",
        "https://example.test/api",
        session=session,
        sleep=lambda seconds, token, page: None,
    )
    return AssessmentPipeline(client, store=LastResultStore(), page_size=20), session


def test_run_assessment_stores_result():
    pipeline, _ = make_pipeline([make_response(200, {"data": PATIENTS})])

    alert_sets = pipeline.run_assessment()

    assert alert_sets.high_risk_patients == {"DEMO001"}
    assert alert_sets.data_quality_issues == {"DEMO002"}

    stored = pipeline.store.require()
    assert stored.alert_sets is alert_sets
    assert stored.patient_count == 2
    assert pipeline.last_summary["total_patients"] == 2


def test_failed_acquisition_keeps_previous_result():
    pipeline, _ = make_pipeline(
        [make_response(200, {"data": PATIENTS})] + [make_response(429, {})] * 4
    )
    first = pipeline.run_assessment()

    with pytest.raises(AcquisitionError) as exc_info:
        pipeline.run_assessment()

    assert str(exc_info.value) == "Failed to fetch patient data"
    assert isinstance(exc_info.value.__cause__, FetchError)
    assert exc_info.value.__cause__.kind == FetchErrorKind.RETRIES_EXHAUSTED
    assert pipeline.store.require().alert_sets is first


def test_submit_without_prior_result():
    pipeline, session = make_pipeline()

    with pytest.raises(NoPriorResultError):
        pipeline.submit_last_result()

    session.post.assert_not_called()


def test_submit_passes_upstream_response_through():
    upstream = {"success": True, "results": {"score": 91.5}}
    pipeline, session = make_pipeline(
        [make_response(200, PATIENTS)], make_response(200, upstream)
    )

    pipeline.run_assessment()
    result = pipeline.submit_last_result()

    assert result.status_code == 200
    assert result.body == upstream

    url = session.post.call_args.args[0]
    payload = session.post.call_args.kwargs["json"]
    assert url == "https://example.test/api/submit-assessment"
    assert payload == {
        "high_risk_patients": ["DEMO001"],
        "fever_patients": ["DEMO001"],
        "data_quality_issues": ["DEMO002"],
    }


def test_submit_surfaces_upstream_status():
    pipeline, _ = make_pipeline(
        [make_response(200, PATIENTS)], make_response(400, {"error": "bad payload"})
    )
    pipeline.run_assessment()

    with pytest.raises(SubmissionError) as exc_info:
        pipeline.submit_last_result()

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == {"error": "bad payload"}


def test_submit_without_response_is_gateway_failure():
    pipeline, _ = make_pipeline(
        [make_response(200, PATIENTS)],
        requests.exceptions.ConnectionError("connection reset"),
    )
    pipeline.run_assessment()

    with pytest.raises(SubmissionError) as exc_info:
        pipeline.submit_last_result()

    assert exc_info.value.status_code == 502


def test_each_run_recomputes_result():
    pipeline, _ = make_pipeline(
        [
            make_response(200, PATIENTS),
            make_response(200, PATIENTS[1:]),
        ]
    )

    pipeline.run_assessment()
    second = pipeline.run_assessment()

    assert second.high_risk_patients == set()
    assert pipeline.store.require().alert_sets.high_risk_patients == set()


def test_create_pipeline_requires_api_key():
    with pytest.raises(ValueError):
        create_pipeline(AssessmentConfig(api_key=None))


def test_create_pipeline_from_config():
    config = AssessmentConfig(
        api_key="test-key",
        base_url="https://example.test/api",
        page_size=5,
        max_retries=2,
        request_timeout=10,
        fetch_timeout=60,
    )

    with patch("src.extract.patients_api.new_session") as mock_session:
        pipeline = create_pipeline(config)

    mock_session.assert_called_once_with("test-key")
    assert pipeline.page_size == 5
    assert pipeline.fetch_timeout == 60
    assert pipeline.client.retry_policy.max_retries == 2
    assert pipeline.client.request_timeout == 10
