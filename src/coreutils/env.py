from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_get_int(key: str, default: int) -> int:
    """Get an integer environment variable, raising ValueError if malformed."""
    raw = env_get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def env_get_float(key: str, default: float | None) -> float | None:
    """Get a float environment variable, raising ValueError if malformed."""
    raw = env_get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class AssessmentConfig:
    api_key: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    page_size: int = 20
    max_retries: int = 3
    request_timeout: float = 30.0
    fetch_timeout: Optional[float] = None


def load_config() -> AssessmentConfig:
    """
    Build the pipeline configuration from the environment

    Returns:
        AssessmentConfig: Validated configuration

    Raises:
        ValueError: On malformed or out-of-range values
    """
    config = AssessmentConfig(
        api_key=env_get("PATIENT_API_KEY"),
        base_url=(env_get("PATIENT_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        page_size=env_get_int("PATIENT_PAGE_SIZE", 20),
        max_retries=env_get_int("PATIENT_MAX_RETRIES", 3),
        request_timeout=env_get_float("REQUEST_TIMEOUT", 30.0),
        fetch_timeout=env_get_float("FETCH_TIMEOUT", None),
    )

    if config.page_size < 1:
        raise ValueError(f"PATIENT_PAGE_SIZE must be positive, got {config.page_size}")
    if config.max_retries < 0:
        raise ValueError(
            f"PATIENT_MAX_RETRIES must not be negative, got {config.max_retries}"
        )
    if config.request_timeout <= 0:
        raise ValueError("REQUEST_TIMEOUT must be positive")
    if config.fetch_timeout is not None and config.fetch_timeout <= 0:
        raise ValueError("FETCH_TIMEOUT must be positive")

    return config
