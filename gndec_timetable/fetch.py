"""Fetch a department timetable page.

This is the network collaborator of the parsing core: it returns HTML text
or raises FetchError. Transient failures (timeouts, connection errors, 5xx)
are retried a bounded number of times; 4xx responses fail immediately.
"""
from __future__ import annotations

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .config import get_config
from .errors import FetchError, TransientFetchError
from .logging import get_logger

log = get_logger(__name__)


def _get_once(session: requests.Session, url: str, timeout: float) -> str:
    try:
        resp = session.get(url, timeout=timeout)
    except (requests.ConnectionError, requests.Timeout) as e:
        raise TransientFetchError(f"{url}: {e}") from e
    except requests.RequestException as e:
        raise FetchError(f"{url}: {e}") from e

    if resp.status_code >= 500:
        raise TransientFetchError(f"{url}: HTTP {resp.status_code}")
    if resp.status_code >= 400:
        raise FetchError(f"{url}: HTTP {resp.status_code}")

    # Department servers often omit the charset; let requests sniff it.
    if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
        resp.encoding = resp.apparent_encoding or "utf-8"
    return resp.text


def fetch_html(
    url: str,
    *,
    timeout: float | None = None,
    attempts: int | None = None,
    backoff_seconds: float | None = None,
    session: requests.Session | None = None,
) -> str:
    """Download a timetable page.

    Args:
        url: Department timetable URL.
        timeout: Per-request timeout in seconds (default from config).
        attempts: Total attempts for transient failures (default from config).
        backoff_seconds: Wait between attempts (default from config).
        session: Optional requests session to reuse.

    Raises:
        FetchError: If the page could not be retrieved.
    """
    config = get_config()
    timeout = config.request_timeout if timeout is None else timeout
    attempts = config.fetch_attempts if attempts is None else attempts
    backoff_seconds = config.fetch_backoff_seconds if backoff_seconds is None else backoff_seconds

    own_session = session is None
    if session is None:
        session = requests.Session()
        session.headers["User-Agent"] = config.user_agent

    try:
        retrying = Retrying(
            stop=stop_after_attempt(max(1, attempts)),
            wait=wait_fixed(backoff_seconds),
            retry=retry_if_exception_type(TransientFetchError),
            before_sleep=lambda state: log.warning(
                "fetch_retry",
                url=url,
                attempt=state.attempt_number,
                error=str(state.outcome.exception()),
            ),
            reraise=True,
        )
        html = retrying(_get_once, session, url, timeout)
    finally:
        if own_session:
            session.close()

    log.info("page_fetched", url=url, chars=len(html))
    return html
