"""Project configuration and credentials.

Project settings come from ``.arcconfig`` at the working-copy root, a
JSON object such as::

    {
      "phabricator.uri": "https://phabricator.example.com/",
      "repository.callsign": "WEB",
      "slack.uri": "https://example.slack.com/",
      "owners.slack_field": "custom.slack-channel"
    }

The Conduit API token is taken from ``CONDUIT_API_TOKEN`` or, failing
that, from the ``hosts`` section of ``~/.arcrc``.
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pathowners.errors import ConfigurationError
from pathowners.resolver import LinkSettings

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".arcconfig"
USER_CONFIG_NAME = ".arcrc"
TOKEN_ENV_VAR = "CONDUIT_API_TOKEN"


@dataclass(frozen=True)
class OwnersConfig:
    """Settings read by a single run.

    Parameters
    ----------
    phabricator_uri:
        Base URL for package detail links and, by default, Conduit.
    conduit_uri:
        Explicit Conduit endpoint, overriding ``phabricator_uri``.
    repository_phid:
        PHID of the target repository, when configured directly.
    repository_callsign:
        Callsign to look up when no PHID is configured.
    slack_uri:
        Messaging service base URL for channel links.
    slack_field:
        Package field holding a channel name.
    token:
        Conduit API token, if any.
    """

    phabricator_uri: str | None = None
    conduit_uri: str | None = None
    repository_phid: str | None = None
    repository_callsign: str | None = None
    slack_uri: str | None = None
    slack_field: str | None = None
    token: str | None = None

    @property
    def api_uri(self) -> str:
        """Return the Conduit API base, ending in ``/api/``.

        Raises
        ------
        ConfigurationError
            If neither ``conduit_uri`` nor ``phabricator_uri`` is set.
        """
        base = self.conduit_uri or self.phabricator_uri
        if not base:
            raise ConfigurationError(
                f"No 'phabricator.uri' configured in {PROJECT_CONFIG_NAME}"
            )
        base = base.rstrip("/")
        if not base.endswith("/api"):
            base += "/api"
        return base + "/"

    def link_settings(self) -> LinkSettings:
        return LinkSettings(
            base_uri=self.phabricator_uri,
            slack_uri=self.slack_uri,
            slack_field=self.slack_field,
        )


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def _string(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string, got {value!r}")
    return value


def token_from_arcrc(arcrc: Mapping[str, Any], api_uri: str) -> str | None:
    """Return the token stored for ``api_uri`` in a parsed ``.arcrc``."""
    hosts = arcrc.get("hosts")
    if not isinstance(hosts, Mapping):
        return None
    wanted = api_uri.rstrip("/")
    for host, entry in hosts.items():
        if str(host).rstrip("/") == wanted and isinstance(entry, Mapping):
            token = entry.get("token")
            return token if isinstance(token, str) and token else None
    return None


def load_config(
    root: str | Path,
    home: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> OwnersConfig:
    """Load ``.arcconfig`` from ``root`` and credentials for its host.

    Parameters
    ----------
    root:
        Working-copy root directory.
    home:
        Directory holding ``.arcrc``; defaults to the user's home.
    environ:
        Environment mapping; defaults to ``os.environ``.
    """
    environ = os.environ if environ is None else environ
    project_path = Path(root) / PROJECT_CONFIG_NAME
    project: dict[str, Any] = {}
    if project_path.is_file():
        project = _read_json(project_path)
        logger.debug("Loaded project configuration from %s", project_path)
    else:
        logger.debug("No %s found in %s", PROJECT_CONFIG_NAME, root)

    config = OwnersConfig(
        phabricator_uri=_string(project, "phabricator.uri"),
        conduit_uri=_string(project, "conduit_uri"),
        repository_phid=_string(project, "repository.phid"),
        repository_callsign=_string(project, "repository.callsign"),
        slack_uri=_string(project, "slack.uri"),
        slack_field=_string(project, "owners.slack_field"),
    )

    token = environ.get(TOKEN_ENV_VAR) or None
    if token is None and (config.conduit_uri or config.phabricator_uri):
        arcrc_path = Path(home if home is not None else Path.home()) / USER_CONFIG_NAME
        if arcrc_path.is_file():
            token = token_from_arcrc(_read_json(arcrc_path), config.api_uri)
            logger.debug(
                "Conduit token %s in %s",
                "found" if token else "not found",
                arcrc_path,
            )

    return replace(config, token=token)


__all__ = [
    "OwnersConfig",
    "PROJECT_CONFIG_NAME",
    "TOKEN_ENV_VAR",
    "USER_CONFIG_NAME",
    "load_config",
    "token_from_arcrc",
]
