"""
Patients API Client - Pure I/O Operations

This module handles all external API calls to the patients service with no
business logic. Returns raw patient records that the transformation layer
scores and classifies.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from ..coreutils.request import new_session
from .errors import FetchError, FetchErrorKind
from .retry import CancellationToken, RetryPolicy, retry_after_seconds

logger = logging.getLogger(__name__)

# API Endpoints
PATIENTS_PATH = "/patients"
SUBMIT_ASSESSMENT_PATH = "/submit-assessment"

RATE_LIMIT_STATUS = 429
RETRYABLE_SERVER_STATUSES = range(500, 504)  # 500-503 inclusive


class MalformedResponse(ValueError):
    """Page body is not JSON or does not hold a list of records"""


def extract_page_records(body: Any) -> List[Any]:
    """
    Pull the record list out of a page body

    The list may be the body itself or nested under ``data``.

    Raises:
        MalformedResponse: If no list-shaped record collection is present
    """
    records = body
    if isinstance(body, dict) and body.get("data") is not None:
        records = body["data"]

    if not isinstance(records, list):
        raise MalformedResponse(
            f"Expected a list of patients, got {type(records).__name__}"
        )
    return records


def page_has_next(body: Any) -> Optional[bool]:
    """Read ``pagination.hasNext`` when the upstream sends it"""
    if not isinstance(body, dict):
        return None
    pagination = body.get("pagination")
    if not isinstance(pagination, dict):
        return None
    has_next = pagination.get("hasNext")
    return has_next if isinstance(has_next, bool) else None


class PatientsAPIClient:
    """Pure API client for the patients endpoints"""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        retry_policy: Optional[RetryPolicy] = None,
        request_timeout: float = 30,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float, CancellationToken, int], None]] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy()
        self.request_timeout = request_timeout
        self.session = session or new_session(api_key)
        self._sleep = sleep or (lambda seconds, token, page: token.sleep(seconds, page))

    def _timeout(self, cancel_token: CancellationToken) -> float:
        remaining = cancel_token.remaining()
        if remaining is None:
            return self.request_timeout
        return max(0.001, min(self.request_timeout, remaining))

    def get_patients_page_body(
        self,
        page: int,
        limit: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Dict[str, Any] | List[Any]:
        """
        Fetch one page, retrying transient failures with bounded backoff

        Args:
            page: 1-based page number
            limit: Page size requested from the upstream
            cancel_token: Cooperative cancellation for this run

        Returns:
            The decoded page body; its record list is known to be list-shaped

        Raises:
            FetchError: On cancellation, non-retryable failure or exhaustion
        """
        cancel_token = cancel_token or CancellationToken()
        url = f"{self.base_url}{PATIENTS_PATH}"
        params = {"page": page, "limit": limit}
        retry_count = 0

        while True:
            cancel_token.raise_if_cancelled(page)
            attempt = retry_count + 1
            start_time = time.time()

            try:
                response = self.session.get(
                    url,
                    params=params,
                    headers={"x-api-key": self.api_key or ""},
                    timeout=self._timeout(cancel_token),
                )
            except requests.exceptions.RequestException as e:
                if cancel_token.cancelled:
                    logger.error(f"Acquisition deadline reached fetching page {page}")
                    raise FetchError(
                        f"Acquisition cancelled (page {page}): {e}",
                        FetchErrorKind.CANCELLED,
                        page=page,
                        attempts=attempt,
                    ) from e
                logger.error(f"Network failure fetching page {page}: {e}")
                raise FetchError(
                    f"Network failure fetching page {page}: {e}",
                    FetchErrorKind.NETWORK_FAILURE,
                    page=page,
                    attempts=attempt,
                ) from e

            status = response.status_code
            wait_time = self.retry_policy.backoff(retry_count)

            if status == RATE_LIMIT_STATUS:
                kind = FetchErrorKind.RATE_LIMITED
                hint = retry_after_seconds(_safe_json(response))
                if hint is not None:
                    wait_time = hint
                reason = "Rate limited (429)"

            elif status in RETRYABLE_SERVER_STATUSES:
                kind = FetchErrorKind.SERVER_ERROR
                reason = f"Server error ({status})"

            elif 200 <= status < 300:
                try:
                    body = response.json()
                    records = extract_page_records(body)
                except ValueError as e:
                    kind = FetchErrorKind.MALFORMED_RESPONSE
                    reason = f"Invalid data structure ({e})"
                else:
                    logger.debug(
                        f"Fetched page {page} ({len(records)} records): "
                        f"{time.time() - start_time:.2f} seconds"
                    )
                    return body

            else:
                logger.error(f"HTTP {status} fetching page {page}: {response.text}")
                raise FetchError(
                    f"HTTP {status} fetching page {page}",
                    FetchErrorKind.HTTP_ERROR,
                    status_code=status,
                    page=page,
                    attempts=attempt,
                )

            if not self.retry_policy.can_retry(retry_count):
                logger.error(
                    f"Max retries exceeded for page {page}: {reason.lower()}"
                )
                raise FetchError(
                    f"Gave up on page {page} after {attempt} attempts: {reason}",
                    FetchErrorKind.RETRIES_EXHAUSTED,
                    cause_kind=kind,
                    status_code=status,
                    page=page,
                    attempts=attempt,
                )

            logger.warning(
                f"{reason} on page {page}. Retrying in {wait_time:g}s "
                f"(attempt {retry_count + 1}/{self.retry_policy.max_retries})"
            )
            self._sleep(wait_time, cancel_token, page)
            retry_count += 1

    def submit_assessment(self, payload: Dict[str, Any]) -> requests.Response:
        """
        POST the alert sets to the scoring endpoint; no retries

        Raises:
            requests.RequestException: If no response was received
        """
        url = f"{self.base_url}{SUBMIT_ASSESSMENT_PATH}"
        logger.info(f"Submitting assessment to {url}")
        return self.session.post(
            url,
            json=payload,
            headers={"x-api-key": self.api_key or "", "Content-Type": "application/json"},
            timeout=self.request_timeout,
        )


def _safe_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
