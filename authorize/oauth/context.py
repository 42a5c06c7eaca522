"""Per-request state of an authorization code grant."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from authlib.oauth2.rfc6749 import OAuth2Request


class GrantStage(IntEnum):
    """How far a grant has progressed. Stages only advance, one at a time."""

    START = 0
    PARAMS_VALID = 1
    CLIENT_VERIFIED = 2
    USER_APPROVED = 3
    CODE_GENERATED = 4
    PERSISTED = 5
    REDIRECTED = 6


@dataclass(frozen=True)
class GrantClient:
    """Registered client as seen by the grant."""

    client_id: str
    redirect_uri: str | list[str]


@dataclass
class GrantContext:
    """Shared context populated by the grant steps in order."""

    request: OAuth2Request
    stage: GrantStage = GrantStage.START
    response_type: str | None = None
    client_id: str | None = None
    redirect_uri: str | None = None
    state: str | None = None
    client: GrantClient | None = None
    client_redirect_uri: str | None = None
    user: Any = None
    auth_code: str | None = None

    @property
    def is_request_authenticated(self) -> bool:
        """True once client and redirect URI are verified; errors may redirect."""
        return self.stage >= GrantStage.CLIENT_VERIFIED

    def advance(self, stage: GrantStage) -> None:
        """Move to ``stage``, which must directly follow the current one."""
        if stage != self.stage + 1:
            raise RuntimeError(
                f"grant cannot move from {self.stage.name} to {stage.name}"
            )
        self.stage = stage
