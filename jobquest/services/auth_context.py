"""
Auth/session context.

An ``AuthContext`` lives as long as one consumer of the current user: a
single HTTP request, or one open WebSocket. It follows the identity of that
consumer, keeps live subscriptions to the identity record and its profile
document, and exposes the merged ``UserState`` together with the account
operations (signup, login, Google sign-in, logout, password reset, profile update).
"""
import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from jobquest.core.errors import IdentityProviderError
from jobquest.db.models.identity import Identity
from jobquest.db.models.user import UserProfile
from jobquest.schemas.auth import Role, UserState
from jobquest.services import identity_service
from jobquest.services.google_identity import verify_google_id_token
from jobquest.services.identity_service import Persistence, SessionToken
from jobquest.services.subscriptions import SubscriptionHub, hub as default_hub

logger = logging.getLogger(__name__)

IDENTITIES = "identities"
PROFILES = "users"


def identity_fields(identity: Identity) -> dict:
    return {
        "uid": identity.uid,
        "email": identity.email,
        "displayName": identity.display_name,
        "photoURL": identity.photo_url,
        "providerId": identity.provider,
    }


def profile_snapshot(profile: UserProfile) -> dict:
    """Profile document as stored; unset fields are absent rather than None."""
    document = {
        "uid": profile.uid,
        "email": profile.email,
        "username": profile.username,
        "isAdmin": bool(profile.is_admin),
        "photoURL": profile.photo_url,
        "createdAt": profile.created_at,
    }
    return {key: value for key, value in document.items() if value is not None}


def merge_user_state(identity: dict, profile: Optional[dict]) -> UserState:
    merged = {**identity, **(profile or {})}
    merged["role"] = Role.ADMIN if merged.get("isAdmin") else Role.STANDARD
    return UserState.model_validate(merged)


class AuthContext:
    def __init__(
        self,
        db: Session,
        hub: SubscriptionHub = default_hub,
        on_change: Optional[Callable[[Optional[UserState]], None]] = None,
    ):
        self.db = db
        self.hub = hub
        self.user: Optional[UserState] = None
        self._identity: Optional[dict] = None
        self._profile: Optional[dict] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._on_change = on_change

    # -- session lifecycle -------------------------------------------------

    def on_identity_changed(self, identity: Optional[Identity]) -> None:
        """Switch to another identity (or none), re-attaching the subscriptions."""
        self._teardown()

        if identity is None:
            self._identity = None
            self._profile = None
            self._set_user(None)
            return

        self._identity = identity_fields(identity)
        self._unsubscribers = [
            self.hub.subscribe(IDENTITIES, identity.uid, self._on_identity_snapshot),
            self.hub.subscribe(PROFILES, identity.uid, self._on_profile_snapshot),
        ]

        # First snapshot comes from the store, later ones from publishers
        profile = self.db.get(UserProfile, identity.uid)
        self._on_profile_snapshot(profile_snapshot(profile) if profile else None)

    def close(self) -> None:
        self._teardown()

    def _teardown(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_identity_snapshot(self, snapshot: Optional[dict]) -> None:
        if self._identity is None or snapshot is None:
            return
        self._identity = snapshot
        self._set_user(merge_user_state(self._identity, self._profile))

    def _on_profile_snapshot(self, snapshot: Optional[dict]) -> None:
        if self._identity is None:
            return
        self._profile = snapshot
        self._set_user(merge_user_state(self._identity, self._profile))

    def _set_user(self, user: Optional[UserState]) -> None:
        self.user = user
        if self._on_change:
            self._on_change(user)

    @property
    def uid(self) -> Optional[str]:
        return self._identity["uid"] if self._identity else None

    # -- account operations --------------------------------------------------

    def signup(self, email: str, password: str, display_name: str) -> SessionToken:
        identity = identity_service.create_identity(self.db, email, password)
        identity_service.update_identity_profile(self.db, identity, display_name=display_name)

        profile = UserProfile(
            uid=identity.uid,
            email=identity.email,
            username=display_name,
            is_admin=False,
        )
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        self._publish_profile(profile)

        logger.info(f"User signed up: uid={identity.uid}")
        self.on_identity_changed(identity)
        return identity_service.issue_session(identity, Persistence.LOCAL)

    def login(self, email: str, password: str, remember: bool = False) -> SessionToken:
        persistence = Persistence.LOCAL if remember else Persistence.SESSION
        identity = identity_service.authenticate(self.db, email, password)

        logger.info(f"User signed in: uid={identity.uid}, persistence={persistence.value}")
        self.on_identity_changed(identity)
        return identity_service.issue_session(identity, persistence)

    def sign_in_with_google(self, id_token: str, remember: bool = True) -> SessionToken:
        claims = verify_google_id_token(id_token)
        identity = identity_service.find_or_create_federated(self.db, claims)

        if self.db.get(UserProfile, identity.uid) is None:
            profile = UserProfile(
                uid=identity.uid,
                email=identity.email,
                username=identity.display_name or "",
                is_admin=False,
            )
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            self._publish_profile(profile)
            logger.info(f"Profile created for federated user: uid={identity.uid}")

        persistence = Persistence.LOCAL if remember else Persistence.SESSION
        logger.info(f"User signed in with Google: uid={identity.uid}")
        self.on_identity_changed(identity)
        return identity_service.issue_session(identity, persistence)

    def logout(self) -> None:
        if self.uid:
            logger.info(f"User signed out: uid={self.uid}")
        self.on_identity_changed(None)

    def reset_password(self, email: str) -> None:
        identity_service.send_password_reset(self.db, email)

    def update_profile(self, display_name: Optional[str] = None, photo_url: Optional[str] = None) -> UserState:
        """Update display name and/or photo URL of the signed-in user."""
        if self.uid is None:
            raise IdentityProviderError("auth/no-current-user", "No user is signed in.", 401)

        identity = identity_service.get_identity(self.db, self.uid)
        if identity is None:
            raise IdentityProviderError("auth/user-not-found", "User account no longer exists", 404)

        changes = {}
        if display_name is not None:
            changes["display_name"] = display_name
        if photo_url is not None:
            changes["photo_url"] = photo_url
        identity_service.update_identity_profile(self.db, identity, **changes)
        self._identity = identity_fields(identity)
        self.hub.publish(IDENTITIES, identity.uid, self._identity)

        profile = self.db.get(UserProfile, identity.uid)
        if profile is not None:
            if display_name is not None:
                profile.username = display_name
            if photo_url is not None:
                profile.photo_url = photo_url
            self.db.commit()
            self.db.refresh(profile)
            self._publish_profile(profile)
        else:
            self._on_profile_snapshot(None)

        logger.info(f"Profile updated: uid={identity.uid}, fields={sorted(changes)}")
        return self.user

    def _publish_profile(self, profile: UserProfile) -> None:
        self.hub.publish(PROFILES, profile.uid, profile_snapshot(profile))
