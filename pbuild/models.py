"""Data models for pbuild."""

from dataclasses import dataclass
from enum import Enum

CREDENTIALS_MARKER = "api key"


class CommitComparison(Enum):
    """How origin/<branch> relates to local HEAD."""

    IDENTICAL = "identical"
    BEHIND = "behind"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuildConfig:
    """Credentials and identifiers, resolved once at startup."""

    api_key: str
    account: str
    project: str
    api_url: str
    web_url: str

    @property
    def builds_endpoint(self) -> str:
        return f"{self.api_url}/accounts/{self.account}/projects/{self.project}/builds"


@dataclass(frozen=True)
class GateResult:
    """What the safety checks decided to build."""

    branch: str
    commit: str


@dataclass(frozen=True)
class BuildRequest:
    branch: str
    commit: str
    message: str
    user_name: str
    user_email: str
    force: bool = True

    def to_form(self, api_key: str) -> dict[str, str]:
        return {
            "api_key": api_key,
            "branch": self.branch,
            "commit": self.commit,
            "message": self.message,
            "force": "true" if self.force else "false",
            "meta_data[personal]": "true",
            "meta_data[user_name]": self.user_name,
            "meta_data[user_email]": self.user_email,
        }


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a build request: a build number or the raw error payload."""

    number: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.number is not None

    @property
    def credentials_invalid(self) -> bool:
        # Heuristic: the service reports a bad key only in the error text.
        if self.ok or not self.error:
            return False
        return CREDENTIALS_MARKER in self.error.lower()
