"""Configuration resolution for pbuild.

Values come from, highest precedence first: explicit overrides (CLI options or
their ``PBUILD_*`` environment variables, handled by click), then git config
(``pbuild.*``), which git itself resolves repository-local before global.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .errors import ConfigurationMissing
from .models import BuildConfig

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.buildbox.io/v1"
DEFAULT_WEB_URL = "https://buildbox.io"

REQUIRED_KEYS = {
    "api_key": ("pbuild.api-key", "<your-api-key>"),
    "account": ("pbuild.account", "<account-name>"),
    "project": ("pbuild.project", "<project-name>"),
}
OPTIONAL_KEYS = {
    "api_url": ("pbuild.api-url", DEFAULT_API_URL),
    "web_url": ("pbuild.web-url", DEFAULT_WEB_URL),
}

ConfigLookup = Callable[[str], str | None]


def missing_config_message(missing: list[str]) -> str:
    lines = ["Missing pbuild configuration. Set it with:", ""]
    for field in missing:
        key, placeholder = REQUIRED_KEYS[field]
        lines.append(f"  git config --global {key} {placeholder}")
    lines.append("")
    lines.append("Drop --global to set a value for this repository only.")
    return "\n".join(lines)


def _first_set(*candidates: str | None) -> str:
    """Return the first candidate that is not blank, stripped."""
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return ""


def resolve_config(
    overrides: Mapping[str, str | None],
    lookup: ConfigLookup,
) -> BuildConfig:
    """Merge explicit overrides with git config into a ``BuildConfig``.

    ``lookup`` takes a git config key and returns its value or ``None``.
    """
    values: dict[str, str] = {}
    missing: list[str] = []
    for field, (key, _) in REQUIRED_KEYS.items():
        value = _first_set(overrides.get(field), lookup(key))
        if value:
            values[field] = value
        else:
            missing.append(field)
    if missing:
        raise ConfigurationMissing(missing, missing_config_message(missing))

    for field, (key, default) in OPTIONAL_KEYS.items():
        value = _first_set(overrides.get(field), lookup(key)) or default
        values[field] = value.rstrip("/")

    logger.debug(
        "resolved config account=%s project=%s api_url=%s",
        values["account"],
        values["project"],
        values["api_url"],
    )
    return BuildConfig(**values)
