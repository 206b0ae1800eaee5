"""
Request validation schemas for the command surface.
"""

from playdeck.schemas.requests import (
    AccessTokenRequest,
    BuildAuthUrlRequest,
    EnsureCredentialRequest,
    ExchangeCodeRequest,
    RefreshRequest,
    StoreCredentialRequest,
    SetVolumeRequest,
    PlaylistRequest,
)

__all__ = [
    "AccessTokenRequest",
    "BuildAuthUrlRequest",
    "EnsureCredentialRequest",
    "ExchangeCodeRequest",
    "RefreshRequest",
    "StoreCredentialRequest",
    "SetVolumeRequest",
    "PlaylistRequest",
]
