"""
Verification of Google ID tokens for federated sign-in.
"""
import logging

import requests

from jobquest.core.config import GOOGLE_CLIENT_ID, GOOGLE_TOKENINFO_URL
from jobquest.core.errors import IdentityProviderError

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def verify_google_id_token(id_token: str) -> dict:
    """
    Validate an ID token against Google's token-info endpoint.

    Returns the token claims (``sub``, ``email``, ``name``, ``picture``, ...).

    Raises:
        IdentityProviderError: token rejected, audience mismatch, or Google unreachable
    """
    try:
        response = requests.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token}, timeout=10)
    except requests.RequestException as e:
        logger.error(f"Google token verification request failed: {e}")
        raise IdentityProviderError("auth/network-request-failed", "Could not reach Google sign-in", 502) from e

    if response.status_code != 200:
        logger.warning(f"Google rejected ID token: status={response.status_code}")
        raise IdentityProviderError("auth/invalid-credential", "Google sign-in failed: invalid token", 401)

    claims = response.json()

    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise IdentityProviderError("auth/invalid-credential", "Google sign-in failed: unexpected issuer", 401)
    if GOOGLE_CLIENT_ID and claims.get("aud") != GOOGLE_CLIENT_ID:
        raise IdentityProviderError("auth/invalid-credential", "Google sign-in failed: token audience mismatch", 401)
    if not claims.get("email"):
        raise IdentityProviderError("auth/invalid-credential", "Google sign-in failed: no email on account", 401)
    if str(claims.get("email_verified", "false")).lower() != "true":
        raise IdentityProviderError("auth/unverified-email", "Google account email is not verified", 401)

    return claims
