"""
Data Fetcher - Extract Layer

Pure functions for fetching the full patient population from the
paginated patients API. No business logic, just I/O that returns raw records.
"""

import logging
from typing import Any, List, Optional

from .patients_api import PatientsAPIClient, extract_page_records, page_has_next
from .retry import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def fetch_all_patients(
    client: PatientsAPIClient,
    page_size: int = DEFAULT_PAGE_SIZE,
    cancel_token: Optional[CancellationToken] = None,
) -> List[Any]:
    """
    Fetch every patient record, one page at a time

    Pages are requested strictly in order. Pagination ends on an empty page,
    a short page, or explicit ``pagination.hasNext == false`` metadata.

    Args:
        client: Patients API client
        page_size: Records requested per page
        cancel_token: Cooperative cancellation for this run

    Returns:
        List: Raw patient records in pagination order

    Raises:
        FetchError: If any page fails; records from earlier pages are dropped
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

    cancel_token = cancel_token or CancellationToken()
    patients: List[Any] = []
    page = 1

    logger.info(f"Fetching patients (page size {page_size})")

    while True:
        body = client.get_patients_page_body(page, page_size, cancel_token)
        records = extract_page_records(body)

        if not records:
            logger.info(f"Page {page} is empty, stopping")
            break

        patients.extend(records)
        logger.info(
            f"Page {page}: {len(records)} patients (total so far: {len(patients)})"
        )

        if len(records) < page_size:
            logger.info(f"Page {page} is the last (partial) page")
            break

        if page_has_next(body) is False:
            logger.info(f"Page {page} is the last page")
            break

        page += 1

    logger.info(f"Fetched {len(patients)} patients across {page} pages")
    return patients
