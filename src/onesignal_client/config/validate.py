from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import ValidationError

from onesignal_client.config.settings import Settings


@dataclass(frozen=True)
class ConfigValidationIssue:
    path: str
    message: str


class ConfigValidationError(ValueError):
    def __init__(self, issues: Iterable[ConfigValidationIssue]):
        self.issues = list(issues)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = ["Configuration is invalid:"]
        for issue in self.issues:
            lines.append(f"- {issue.path}: {issue.message}")
        return "\n".join(lines)


def issues_from_pydantic_error(error: ValidationError) -> list[ConfigValidationIssue]:
    issues: list[ConfigValidationIssue] = []
    for item in error.errors(include_url=False):
        loc = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        msg = item.get("msg", "Invalid value")
        issues.append(ConfigValidationIssue(path=loc, message=msg))
    return issues


def validate_settings(settings: Settings) -> None:
    issues: list[ConfigValidationIssue] = []

    log_level = settings.observability.log_level.upper()
    allowed_levels = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
    if log_level not in allowed_levels:
        issues.append(
            ConfigValidationIssue(
                path="observability.log_level",
                message=(
                    f"Unsupported log level {settings.observability.log_level!r} "
                    f"(allowed: {sorted(allowed_levels)})"
                ),
            )
        )

    transport = settings.hardening.transport
    if (
        str(settings.onesignal.api_url).lower().startswith("http://")
        and not transport.allow_insecure_http
    ):
        issues.append(
            ConfigValidationIssue(
                path="onesignal.api_url",
                message=(
                    "Plain HTTP API URL is not allowed by default. "
                    "Use https:// or set hardening.transport.allow_insecure_http=true."
                ),
            )
        )

    if not settings.onesignal.verify_tls and not transport.allow_insecure_tls:
        issues.append(
            ConfigValidationIssue(
                path="onesignal.verify_tls",
                message=(
                    "Disabling TLS verification is not allowed by default. "
                    "Set hardening.transport.allow_insecure_tls=true to override (not recommended)."
                ),
            )
        )

    if issues:
        raise ConfigValidationError(issues)
