"""
Grant or revoke the admin flag on a user profile.

The admin flag is never changed through the API; operators use this script.
Run: python -m scripts.make_user_admin alice@example.com [--revoke]
"""
import argparse
import logging
import sys

from jobquest.db.session import SessionLocal
from jobquest.db.models.user import UserProfile
from jobquest.services.identity_service import get_identity_by_email

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def set_admin(email: str, is_admin: bool = True) -> bool:
    """Set the admin flag for the profile behind ``email``. Returns False if there is none."""
    db = SessionLocal()
    try:
        identity = get_identity_by_email(db, email)
        if not identity:
            logger.error(f"No account found for {email}")
            return False

        profile = db.get(UserProfile, identity.uid)
        if not profile:
            logger.error(f"Account {email} has no profile document (uid={identity.uid})")
            return False

        profile.is_admin = is_admin
        db.commit()
        db.refresh(profile)

        logger.info(f"Set is_admin={is_admin} for {email} (uid={identity.uid})")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant or revoke JobQuest admin rights")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="Remove admin rights instead")
    args = parser.parse_args()

    if not set_admin(args.email, not args.revoke):
        print(f"\n[ERROR] Failed to update {args.email}")
        sys.exit(1)
    print(f"\n[SUCCESS] {args.email} is {'no longer' if args.revoke else 'now'} an admin")
