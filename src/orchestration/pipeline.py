"""
Pipeline Orchestrator - Assessment Workflow

Two host-facing operations:
1. run_assessment(): extract all patients, score and classify them, and
   keep the result in the single-slot store.
2. submit_last_result(): send the stored classification to the upstream
   scoring endpoint.

Every acquisition run either fully succeeds or fully fails; a failed run
leaves the previously stored result untouched.
"""

import logging
from typing import Optional

from ..coreutils.env import AssessmentConfig, load_config

# Extract layer imports
from ..extract.data_fetcher import fetch_all_patients
from ..extract.errors import FetchError
from ..extract.patients_api import PatientsAPIClient
from ..extract.retry import CancellationToken, RetryPolicy

# Transform layer imports
from ..transformation.classifier import AlertSets, classify_scores, score_patients
from ..transformation.transformers import build_risk_frame, get_summary_stats

# Load layer imports
from ..load.assessment_submitter import AssessmentSubmitter, SubmissionResult
from ..load.result_store import LastResultStore

logger = logging.getLogger(__name__)

ACQUISITION_FAILED_MESSAGE = "Failed to fetch patient data"


class AcquisitionError(Exception):
    """Patient data could not be acquired; the cause is chained"""

    def __init__(self, message: str = ACQUISITION_FAILED_MESSAGE):
        super().__init__(message)


class AssessmentPipeline:
    """Orchestrates fetch → classify → store, and submission of the result"""

    def __init__(
        self,
        client: PatientsAPIClient,
        store: Optional[LastResultStore] = None,
        page_size: int = 20,
        fetch_timeout: Optional[float] = None,
    ):
        self.client = client
        self.store = store if store is not None else LastResultStore()
        self.page_size = page_size
        self.fetch_timeout = fetch_timeout
        self.submitter = AssessmentSubmitter(client)
        self.last_summary: Optional[dict] = None

    def run_assessment(
        self, cancel_token: Optional[CancellationToken] = None
    ) -> AlertSets:
        """
        Acquire every patient and classify the population

        Args:
            cancel_token: Cooperative cancellation; defaults to one bound to
                the configured fetch timeout

        Returns:
            AlertSets: Freshly computed classification

        Raises:
            AcquisitionError: If any page could not be fetched
        """
        logger.info("🚀 Starting assessment run")
        cancel_token = cancel_token or CancellationToken(timeout=self.fetch_timeout)

        try:
            patients = fetch_all_patients(self.client, self.page_size, cancel_token)
        except FetchError as e:
            logger.error(f"❌ Acquisition failed ({e.kind.value}): {e}")
            raise AcquisitionError() from e

        scores = score_patients(patients)
        alert_sets = classify_scores(scores)

        self.last_summary = get_summary_stats(build_risk_frame(scores))
        logger.info(f"📊 Risk summary: {self.last_summary}")

        self.store.put(alert_sets, patient_count=len(patients))
        logger.info(f"✅ Assessment complete: {alert_sets.counts()}")
        return alert_sets

    def submit_last_result(self) -> SubmissionResult:
        """
        Submit the most recent successful classification

        Raises:
            NoPriorResultError: If no acquisition has completed yet
            SubmissionError: If the upstream rejected or was unreachable
        """
        stored = self.store.require()
        logger.info(
            f"Submitting result computed at {stored.computed_at.isoformat()} "
            f"({stored.patient_count} patients)"
        )
        return self.submitter.submit(stored.alert_sets)


def create_pipeline(
    config: Optional[AssessmentConfig] = None,
    store: Optional[LastResultStore] = None,
) -> AssessmentPipeline:
    """Build a pipeline from configuration (environment by default)"""
    config = config or load_config()
    if not config.api_key:
        raise ValueError("PATIENT_API_KEY environment variable is not set")

    client = PatientsAPIClient(
        api_key=config.api_key,
        base_url=config.base_url,
        retry_policy=RetryPolicy(max_retries=config.max_retries),
        request_timeout=config.request_timeout,
    )
    return AssessmentPipeline(
        client,
        store=store,
        page_size=config.page_size,
        fetch_timeout=config.fetch_timeout,
    )
