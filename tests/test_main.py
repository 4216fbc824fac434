"""
Test Main Entry Point - run/submit commands with a mocked pipeline
"""

import os
import sys
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src import main as entry
from src.load.assessment_submitter import SubmissionResult
from src.orchestration.pipeline import AcquisitionError
from src.transformation.classifier import AlertSets


def make_pipeline():
    pipeline = MagicMock()
    pipeline.run_assessment.return_value = AlertSets(
        high_risk_patients={"DEMO001"}, fever_patients={"DEMO001"}
    )
    pipeline.last_summary = {"total_patients": 1}
    pipeline.submit_last_result.return_value = SubmissionResult(200, {"success": True})
    return pipeline


def test_run_command_does_not_submit(monkeypatch):
    monkeypatch.setenv("PATIENT_API_KEY", "ak_test")
    pipeline = make_pipeline()

    with patch.object(entry, "create_pipeline", return_value=pipeline) as factory:
        results = entry.run_command("run", page_size=5, timeout=30)

    config = factory.call_args.args[0]
    assert config.page_size == 5
    assert config.fetch_timeout == 30
    assert results["alert_sets"]["high_risk_patients"] == ["DEMO001"]
    assert "submission" not in results
    pipeline.submit_last_result.assert_not_called()


def test_submit_command_submits(monkeypatch):
    monkeypatch.setenv("PATIENT_API_KEY", "ak_test")
    pipeline = make_pipeline()

    with patch.object(entry, "create_pipeline", return_value=pipeline):
        results = entry.run_command("submit")

    assert results["submission"] == {"status_code": 200, "body": {"success": True}}


def test_main_exits_non_zero_on_acquisition_failure(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "argv", ["main.py", "run"])
    monkeypatch.chdir(tmp_path)

    with patch.object(entry, "run_command", side_effect=AcquisitionError()):
        with pytest.raises(SystemExit) as exc_info:
            entry.main()

    assert exc_info.value.code == 1
