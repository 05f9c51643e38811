"""
Identity provider: accounts, credentials and session tokens.

This layer knows nothing about profiles or roles; it owns the ``identities``
table and the tokens that prove a session. Failures are reported as
``IdentityProviderError`` with a provider-style code (``auth/...``) and a
message meant to be shown to the user as is.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from jobquest.core import config
from jobquest.core.errors import IdentityProviderError
from jobquest.core.security import (
    RESET_TOKEN,
    SESSION_TOKEN,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from jobquest.db.models.identity import Identity
from jobquest.services.document_store import new_document_id
from jobquest.services.mail_service import send_password_reset_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PASSWORD_PROVIDER = "password"
GOOGLE_PROVIDER = "google.com"

_UNSET = object()


class Persistence(str, enum.Enum):
    """How long a session survives: across browser restarts, or for this tab only."""
    LOCAL = "local"
    SESSION = "session"


@dataclass
class SessionToken:
    access_token: str
    persistence: Persistence
    max_age: Optional[int]  # cookie max-age in seconds; None means a session cookie
    uid: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_identity(db: Session, uid: str) -> Optional[Identity]:
    return db.query(Identity).filter(Identity.uid == uid).first()


def get_identity_by_email(db: Session, email: str) -> Optional[Identity]:
    return db.query(Identity).filter(Identity.email == normalize_email(email)).first()


def create_identity(db: Session, email: str, password: str) -> Identity:
    """Create an email/password account."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise IdentityProviderError(
            "auth/weak-password",
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
        )
    if get_identity_by_email(db, email):
        raise IdentityProviderError("auth/email-already-in-use", "Email already registered", 409)

    identity = Identity(
        uid=new_document_id(28),
        email=normalize_email(email),
        password_hash=hash_password(password),
        provider=PASSWORD_PROVIDER,
    )
    db.add(identity)
    db.commit()
    db.refresh(identity)

    logger.info(f"Identity created: uid={identity.uid}, provider={identity.provider}")
    return identity


def authenticate(db: Session, email: str, password: str) -> Identity:
    identity = get_identity_by_email(db, email)
    if not identity or not verify_password(password, identity.password_hash):
        logger.warning("Sign-in failed: invalid credentials")
        raise IdentityProviderError("auth/invalid-credential", "Invalid credentials", 401)
    return identity


def find_or_create_federated(db: Session, claims: dict) -> Identity:
    """
    Resolve a verified Google account to an identity.

    Accounts are linked by email, so a user who signed up with a password and
    later uses Google with the same address lands on the same identity.
    """
    identity = get_identity_by_email(db, claims["email"])
    if identity:
        return identity

    identity = Identity(
        uid=new_document_id(28),
        email=normalize_email(claims["email"]),
        password_hash=None,
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
        provider=GOOGLE_PROVIDER,
    )
    db.add(identity)
    db.commit()
    db.refresh(identity)

    logger.info(f"Identity created: uid={identity.uid}, provider={identity.provider}")
    return identity


def update_identity_profile(db: Session, identity: Identity, display_name=_UNSET, photo_url=_UNSET) -> Identity:
    if display_name is not _UNSET:
        identity.display_name = display_name
    if photo_url is not _UNSET:
        identity.photo_url = photo_url
    db.commit()
    db.refresh(identity)
    return identity


def issue_session(identity: Identity, persistence: Persistence) -> SessionToken:
    if persistence == Persistence.LOCAL:
        lifetime = timedelta(days=config.REMEMBER_ME_DAYS)
        max_age = int(lifetime.total_seconds())
    else:
        lifetime = timedelta(minutes=config.SESSION_TOKEN_MINUTES)
        max_age = None

    token = create_access_token(
        {"sub": identity.uid, "persistence": persistence.value},
        expires_delta=lifetime,
    )
    return SessionToken(access_token=token, persistence=persistence, max_age=max_age, uid=identity.uid)


def resolve_session(db: Session, token: Optional[str]) -> Optional[Identity]:
    """Identity behind a session token, or None for a missing/invalid/expired token."""
    if not token:
        return None
    payload = decode_access_token(token, SESSION_TOKEN)
    if payload is None:
        return None
    return get_identity(db, payload["sub"])


def send_password_reset(db: Session, email: str) -> None:
    identity = get_identity_by_email(db, email)
    if not identity:
        raise IdentityProviderError("auth/user-not-found", "No account found with this email", 404)

    token = create_access_token(
        {"sub": identity.uid},
        expires_delta=timedelta(minutes=config.PASSWORD_RESET_MINUTES),
        token_type=RESET_TOKEN,
    )
    reset_link = f"{config.FRONTEND_URL}/reset-password?token={token}"
    send_password_reset_email(identity.email, reset_link)
    logger.info(f"Password reset dispatched: uid={identity.uid}")


def confirm_password_reset(db: Session, token: str, new_password: str) -> Identity:
    payload = decode_access_token(token, RESET_TOKEN)
    identity = get_identity(db, payload["sub"]) if payload else None
    if identity is None:
        raise IdentityProviderError("auth/invalid-action-code", "The password reset link is invalid or has expired")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise IdentityProviderError(
            "auth/weak-password",
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
        )

    identity.password_hash = hash_password(new_password)
    db.commit()
    db.refresh(identity)

    logger.info(f"Password reset completed: uid={identity.uid}")
    return identity
