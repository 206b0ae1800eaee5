"""
Request validation schemas using Pydantic.

Validates the arguments the UI layer passes to each command before the
command is scheduled.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class AccessTokenRequest(BaseModel):
    """Arguments shared by every playback command."""

    access_token: Optional[str] = Field(
        default=None,
        description="Bearer token to use instead of the stored credential",
    )

    class Config:
        extra = "forbid"


class BuildAuthUrlRequest(BaseModel):
    """Arguments for build_authorization_url."""

    scopes: Optional[List[str]] = None

    class Config:
        extra = "forbid"

    @field_validator("scopes")
    @classmethod
    def drop_blank_scopes(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [s.strip() for s in v if s and s.strip()]


class ExchangeCodeRequest(BaseModel):
    """Arguments for exchange_code. Without a code the captured one is used."""

    code: Optional[str] = None

    class Config:
        extra = "forbid"


class RefreshRequest(BaseModel):
    """Arguments for refresh. Without a token the stored one is used."""

    refresh_token: Optional[str] = None

    class Config:
        extra = "forbid"


class EnsureCredentialRequest(BaseModel):
    """ensure_valid_credential takes no arguments."""

    class Config:
        extra = "forbid"


class StoreCredentialRequest(BaseModel):
    """Arguments for store_credential: a token endpoint envelope."""

    credential: Dict[str, Any]

    class Config:
        extra = "forbid"


class SetVolumeRequest(AccessTokenRequest):
    """Arguments for set_volume."""

    volume: Annotated[int, Field(ge=0, le=100)]


class PlaylistRequest(AccessTokenRequest):
    """Arguments for change_playlist and get_playlist_image."""

    playlist_id: str

    @field_validator("playlist_id")
    @classmethod
    def validate_playlist_id(cls, v: str) -> str:
        """Ensure playlist id is not empty."""
        if not v or not v.strip():
            raise ValueError("playlist_id cannot be empty")
        return v.strip()
