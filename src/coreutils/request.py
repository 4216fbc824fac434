import requests
from requests.adapters import HTTPAdapter
from typing import Optional


def new_session(api_key: Optional[str] = None) -> requests.Session:
    """Create a new requests session for the patients API

    Transport-level retries are disabled: the extract layer owns the
    retry policy so that every wait is counted and cancellable.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update(
        {"User-Agent": "patient-risk-assessment/1.0", "Accept": "application/json"}
    )
    if api_key:
        session.headers["x-api-key"] = api_key

    return session
