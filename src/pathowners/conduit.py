"""Conduit client for querying ownership packages.

Conduit methods are called with an HTTP POST to ``<api uri><method>``
carrying the JSON-encoded parameters in a ``params`` form field.  Every
response is an envelope ``{"result": ..., "error_code": ..., "error_info": ...}``;
a non-null ``error_code`` is a failed call.

Usage
-----
::

    from pathowners.conduit import ConduitClient

    with ConduitClient("https://phabricator.example.com/api/", token) as client:
        records = client.search_packages("PHID-REPO-abc", ["lib/x.go"])
"""
from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from pathowners.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ConduitClient:
    """Synchronous Conduit API client.

    Parameters
    ----------
    api_uri:
        Conduit API base, e.g. ``https://phabricator.example.com/api/``.
    token:
        API token sent with every call, if any.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional ``httpx`` transport, used by tests.
    """

    def __init__(
        self,
        api_uri: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_uri = api_uri.rstrip("/") + "/"
        self._token = token
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "ConduitClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Raw calls
    # ------------------------------------------------------------------

    def call(self, method: str, params: dict[str, Any]) -> Any:
        """Call ``method`` and return its ``result``.

        Raises
        ------
        TransportError
            On network failure, a non-2xx status, an undecodable body or
            a Conduit error response.
        """
        payload = dict(params)
        if self._token:
            payload["__conduit__"] = {"token": self._token}

        url = self._api_uri + method
        logger.debug("POST %s", url)
        try:
            response = self._client.post(
                url,
                data={"params": json.dumps(payload), "output": "json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP {exc.response.status_code} from {url}", method=method
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, method=method) from exc

        try:
            envelope = response.json()
        except ValueError as exc:
            raise TransportError("Response is not valid JSON", method=method) from exc
        if not isinstance(envelope, dict):
            raise TransportError("Response is not a Conduit envelope", method=method)

        error_code = envelope.get("error_code")
        if error_code:
            raise TransportError(
                str(envelope.get("error_info") or "Conduit call failed"),
                method=method,
                error_code=str(error_code),
            )
        return envelope.get("result")

    def _search(self, method: str, params: dict[str, Any]) -> list[Any]:
        """Call a ``*.search`` method, following cursors to the last page."""
        records: list[Any] = []
        after: Any = None
        seen: set[str] = set()
        pages = 0
        while True:
            page_params = dict(params)
            if after is not None:
                page_params["after"] = after
            result = self.call(method, page_params)
            if not isinstance(result, dict):
                raise TransportError("Search result is not an object", method=method)
            data = result.get("data") or []
            if not isinstance(data, list):
                raise TransportError("Search 'data' is not a list", method=method)
            records.extend(data)
            pages += 1
            cursor = result.get("cursor")
            after = cursor.get("after") if isinstance(cursor, dict) else None
            if after is None:
                break
            if str(after) in seen:
                logger.warning("%s repeated cursor %r; stopping", method, after)
                break
            seen.add(str(after))
        logger.debug("%s returned %d record(s) in %d page(s)", method, len(records), pages)
        return records

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_packages(
        self, repository_phid: str, paths: Sequence[str]
    ) -> list[Any]:
        """Return active packages touching ``paths`` in the repository.

        Records come back ordered by name, with path attachments.
        """
        return self._search(
            "owners.search",
            {
                "constraints": {
                    "repositories": [repository_phid],
                    "paths": list(paths),
                    "statuses": ["active"],
                },
                "attachments": {"paths": True},
                "order": "name",
            },
        )

    def repository_phid(self, callsign: str) -> str:
        """Look up the PHID of the repository with ``callsign``.

        Raises
        ------
        ConfigurationError
            If no repository has that callsign.
        """
        records = self._search(
            "diffusion.repository.search",
            {"constraints": {"callsigns": [callsign]}},
        )
        for record in records:
            if isinstance(record, dict) and isinstance(record.get("phid"), str):
                return record["phid"]
        raise ConfigurationError(f"No repository found with callsign {callsign!r}")


__all__ = ["ConduitClient", "DEFAULT_TIMEOUT"]
