"""
Assessment Submitter - Load Layer

Sends the alert sets to the upstream scoring endpoint and passes the
upstream response back verbatim.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from ..extract.patients_api import PatientsAPIClient
from ..transformation.classifier import AlertSets

logger = logging.getLogger(__name__)

GATEWAY_FAILURE_STATUS = 502


@dataclass(frozen=True)
class SubmissionResult:
    status_code: int
    body: Any


class SubmissionError(Exception):
    """Upstream rejected the submission or could not be reached"""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class AssessmentSubmitter:
    """Thin pass-through to the submit-assessment endpoint"""

    def __init__(self, client: PatientsAPIClient):
        self.client = client

    def submit(self, alert_sets: AlertSets) -> SubmissionResult:
        """
        Submit alert sets for scoring

        Args:
            alert_sets: Classification to submit

        Returns:
            SubmissionResult: Upstream status and body

        Raises:
            SubmissionError: On a non-2xx response, or 502 if none was received
        """
        payload = alert_sets.to_payload()
        logger.info(f"Submitting alert sets: {alert_sets.counts()}")

        try:
            response = self.client.submit_assessment(payload)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Submission failed, no response received: {e}")
            raise SubmissionError(
                f"Submission failed: {e}", GATEWAY_FAILURE_STATUS
            ) from e

        body = _response_body(response)
        if not 200 <= response.status_code < 300:
            logger.error(f"❌ Submission rejected: HTTP {response.status_code}")
            raise SubmissionError(
                f"Submission rejected with HTTP {response.status_code}",
                response.status_code,
                body,
            )

        logger.info(f"✅ Submission accepted: HTTP {response.status_code}")
        return SubmissionResult(status_code=response.status_code, body=body)
