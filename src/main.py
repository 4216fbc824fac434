"""
Main Entry Point - Patient Risk Assessment

Runs acquisition and classification against the patients API, and
optionally submits the classification for scoring.
"""

import json
from dataclasses import replace
import logging
import os
import sys
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.coreutils.env import load_config
from src.coreutils.logging import setup_logging
from src.load.assessment_submitter import SubmissionError
from src.load.result_store import NoPriorResultError
from src.orchestration.pipeline import AcquisitionError, create_pipeline

logger = logging.getLogger(__name__)


def run_command(
    command: str, page_size: Optional[int] = None, timeout: Optional[float] = None
) -> dict:
    """
    Run the assessment and, for "submit", send it upstream

    Args:
        command: "run" or "submit"
        page_size: Overrides PATIENT_PAGE_SIZE
        timeout: Overrides FETCH_TIMEOUT (seconds)

    Returns:
        dict: Alert sets, summary and (for submit) the upstream response
    """
    config = load_config()
    overrides = {}
    if page_size is not None:
        overrides["page_size"] = page_size
    if timeout is not None:
        overrides["fetch_timeout"] = timeout
    if overrides:
        config = replace(config, **overrides)

    pipeline = create_pipeline(config)

    logger.info(f"🚀 Running {command} (page_size={config.page_size})")
    alert_sets = pipeline.run_assessment()
    results = {
        "alert_sets": alert_sets.to_payload(),
        "summary": pipeline.last_summary,
    }

    if command == "submit":
        submission = pipeline.submit_last_result()
        results["submission"] = {
            "status_code": submission.status_code,
            "body": submission.body,
        }

    return results


def main():
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Patient Risk Assessment Pipeline")
    parser.add_argument(
        "command",
        choices=["run", "submit"],
        help="run: fetch and classify; submit: fetch, classify and submit",
    )
    parser.add_argument("--page-size", type=int, help="Patients per page")
    parser.add_argument(
        "--timeout", type=float, help="Abort acquisition after this many seconds"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    if args.page_size is not None and args.page_size < 1:
        parser.error("--page-size must be positive")

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        results = run_command(args.command, args.page_size, args.timeout)
    except AcquisitionError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except SubmissionError as e:
        logger.error(f"❌ {e} (status {e.status_code}): {e.body}")
        sys.exit(1)
    except (NoPriorResultError, ValueError) as e:
        logger.error(f"❌ {e}")
        sys.exit(2)

    print(json.dumps(results, indent=2, default=str))


if __name__ == "__main__":
    main()
