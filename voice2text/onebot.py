"""
Minimal OneBot v11 HTTP API client.

Only the ``get_record`` action is needed: it asks the OneBot implementation
to convert a received voice file and, when the implementation is configured
to expose local files (``enableLocalFile2Url`` in go-cqhttp style
implementations), returns the converted audio as base64.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class OneBotError(RuntimeError):
    """The OneBot API answered with a non-``ok`` status."""


class OneBotClient:
    def __init__(
        self,
        base_url: str,
        *,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests

    def _call(self, action: str, params: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        response = self.session.post(
            f"{self.base_url}/{action}",
            json=params,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        body = response.json()
        if body.get("status") != "ok":
            raise OneBotError(
                f"OneBot action {action} failed: retcode={body.get('retcode')} {body.get('wording') or body.get('msg') or ''}".rstrip()
            )
        return body.get("data") or {}

    def get_record(self, file: str, out_format: str = "wav") -> Dict[str, Any]:
        """Fetch a voice file converted to ``out_format``.

        Returns:
            The ``data`` object of the response, typically with ``file`` and,
            when enabled on the OneBot side, ``base64``.
        """
        logger.debug("Requesting OneBot record %s as %s", file, out_format)
        return self._call("get_record", {"file": file, "out_format": out_format})
