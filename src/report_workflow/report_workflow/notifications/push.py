"""Push delivery trigger.

One POST per dispatch to the push gateway, run on a background executor.
Single attempt, bounded timeout, no retry: a dead gateway only costs a log line.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Dict, Optional, Sequence

import requests

from ..core.constants import DEFAULT_PUSH_MAX_WORKERS, DEFAULT_PUSH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class PushClient:
    def __init__(
        self,
        endpoint_url: Optional[str],
        *,
        api_token: Optional[str] = None,
        timeout: float = DEFAULT_PUSH_TIMEOUT_SECONDS,
        executor: Optional[Executor] = None,
        max_workers: int = DEFAULT_PUSH_MAX_WORKERS,
    ):
        self.endpoint_url = (endpoint_url or "").strip() or None
        self.api_token = api_token
        self.timeout = float(timeout)
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="push")
        self._owns_executor = executor is None

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def send(self, user_ids: Sequence[str], *, title: str, body: str, link: Optional[str] = None) -> "Future[bool]":
        """Hand the delivery to the executor and return its handle immediately."""
        payload = {"userIds": [str(u) for u in user_ids], "title": title, "body": body}
        if link:
            payload["link"] = link
        return self._executor.submit(self._post, payload)

    def _post(self, payload: dict) -> bool:
        if not self.endpoint_url:
            logger.debug("Push endpoint not configured; skipping delivery to %d users", len(payload["userIds"]))
            return False

        try:
            response = requests.post(
                self.endpoint_url,
                json=payload,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.warning("Push trigger timed out after %.1fs: %s", self.timeout, e)
            return False
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "N/A"
            logger.warning("Push trigger rejected (status=%s): %s", status, e)
            return False
        except requests.exceptions.RequestException as e:
            logger.warning("Push trigger failed: %s", e)
            return False

        logger.info("Push trigger accepted for %d users", len(payload["userIds"]), extra={"recipients": len(payload["userIds"])})
        return True

    def shutdown(self, *, wait: bool = False) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
