"""Firebase identity adapter."""

from .client import (
    FirebaseIdentityClient,
    MockFirebaseIdentityClient,
    RealFirebaseIdentityClient,
    map_error_code,
)

__all__ = [
    "FirebaseIdentityClient",
    "MockFirebaseIdentityClient",
    "RealFirebaseIdentityClient",
    "map_error_code",
]
