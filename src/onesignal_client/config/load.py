"""Settings loading: `.env`, then optional YAML, then environment variables."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from onesignal_client.config.settings import Settings
from onesignal_client.config.validate import (
    ConfigValidationError,
    ConfigValidationIssue,
    issues_from_pydantic_error,
    validate_settings,
)

DEFAULT_CONFIG_PATH = Path("config/config.yaml")

# Credentials the client cannot run without, with the env var that supplies each.
_CREDENTIAL_ENV_VARS: dict[str, str] = {
    "onesignal.app_id": "ONESIGNAL_APP_ID",
    "onesignal.api_key": "ONESIGNAL_API_KEY",
}


def _fail(path: str, message: str) -> ConfigValidationError:
    return ConfigValidationError([ConfigValidationIssue(path=path, message=message)])


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise _fail(str(path), f"Unable to read config file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise _fail(str(path), f"Invalid YAML: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise _fail(str(path), "YAML root must be a mapping/object")
    return raw


def _yaml_overrides(config_path: str | Path | None) -> dict[str, Any]:
    """
    An explicit path (argument or CONFIG_PATH) must exist. The default path is
    only read when present.
    """
    explicit = config_path if config_path is not None else os.environ.get("CONFIG_PATH")
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise _fail("CONFIG_PATH", f"Config file not found: {path}")
        return _read_yaml(path)

    if DEFAULT_CONFIG_PATH.exists():
        return _read_yaml(DEFAULT_CONFIG_PATH)
    return {}


def _explain(issues: list[ConfigValidationIssue]) -> list[ConfigValidationIssue]:
    """Point missing credentials at the env var that sets them."""
    out: list[ConfigValidationIssue] = []
    for issue in issues:
        if issue.path == "onesignal" and "Field required" in issue.message:
            # The whole section is absent; report each credential on its own.
            pending = [ConfigValidationIssue(key, "Field required") for key in _CREDENTIAL_ENV_VARS]
        else:
            pending = [issue]

        for item in pending:
            env_var = _CREDENTIAL_ENV_VARS.get(item.path)
            if env_var and env_var not in item.message:
                item = ConfigValidationIssue(
                    item.path, f"{item.message} Set `{env_var}` (or YAML `{item.path}`)."
                )
            out.append(item)
    return out


def load_settings(*, config_path: str | Path | None = None) -> Settings:
    if Path(".env").is_file():
        load_dotenv(dotenv_path=Path(".env"), override=False)

    yaml_data = _yaml_overrides(config_path)

    try:
        settings = Settings(**yaml_data)
    except ValidationError as exc:
        raise ConfigValidationError(_explain(issues_from_pydantic_error(exc))) from exc

    validate_settings(settings)
    return settings
