# =============================================================================
# core/services/admin_service.py - Admin Accounts
# =============================================================================
# CMS accounts live in admin_users with a scrypt hash and a permission set.
# The root "admin" account is created from ADMIN_PASSWORD on first start
# and can never be deleted.
# =============================================================================

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timezone
from typing import Any

from app.config import settings
from app.exceptions import AdminUserError, InvalidCredentialsError
from core.models.admin import AdminPermissions
from lib.supabase_client import SupabaseClient
from lib.utils import sanitize_text

logger = logging.getLogger(__name__)

ROOT_USERNAME = "admin"

# scrypt parameters (N=2^14, r=8, p=1, 64-byte key)
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_KEY_LEN = 64


def hash_password(password: str, salt: str) -> str:
    """Derive the hex scrypt hash stored for an account."""
    derived = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_KEY_LEN,
    )
    return derived.hex()


def new_salt() -> str:
    return secrets.token_hex(16)


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    """Constant-time comparison of a candidate password against a stored hash."""
    candidate = hash_password(password, salt)
    return hmac.compare_digest(candidate, password_hash)


class AdminService:
    """Service for admin account management."""

    @staticmethod
    def ensure_root_admin() -> bool:
        """
        Create the root admin account if it doesn't exist.

        Returns:
            True if the account was created
        """
        if SupabaseClient.fetch_admin_user(ROOT_USERNAME):
            return False

        salt = new_salt()
        client = SupabaseClient.get_client()
        client.table("admin_users").insert({
            "username": ROOT_USERNAME,
            "salt": salt,
            "password_hash": hash_password(settings.ADMIN_PASSWORD, salt),
            "permissions": AdminPermissions.root().model_dump(by_alias=True),
        }).execute()

        logger.info("Created root admin account")
        return True

    @staticmethod
    def authenticate(username: str, password: str) -> AdminPermissions:
        """
        Check a username/password pair.

        Returns:
            The account's permissions

        Raises:
            InvalidCredentialsError: Unknown user or wrong password (same error for both)
        """
        user = SupabaseClient.fetch_admin_user(username)
        if not user or not user.get("salt") or not user.get("password_hash"):
            raise InvalidCredentialsError()

        if not verify_password(password, user["salt"], user["password_hash"]):
            raise InvalidCredentialsError()

        AdminService._touch(username)
        return AdminPermissions.model_validate(user.get("permissions") or {})

    @staticmethod
    def _touch(username: str) -> None:
        client = SupabaseClient.get_client()
        try:
            client.table("admin_users").update({
                "last_active": datetime.now(timezone.utc).isoformat(),
            }).eq("username", username).execute()
        except Exception as e:
            logger.warning(f"Failed to update last_active for {username}: {e}")

    @staticmethod
    def list_users() -> list[dict[str, Any]]:
        """Accounts without their credentials."""
        client = SupabaseClient.get_client()
        response = client.table("admin_users").select("username, permissions, last_active").execute()
        return response.data or []

    @staticmethod
    def add_user(username: str, password: str, permissions: AdminPermissions) -> str:
        """
        Create an admin account.

        Returns:
            The stored (sanitized) username

        Raises:
            AdminUserError: If the username is taken
        """
        safe_username = sanitize_text(username)
        salt = new_salt()
        client = SupabaseClient.get_client()

        try:
            client.table("admin_users").insert({
                "username": safe_username,
                "salt": salt,
                "password_hash": hash_password(password, salt),
                "permissions": permissions.model_dump(by_alias=True),
            }).execute()
        except Exception as e:
            if "23505" in str(e):
                raise AdminUserError(f"User already exists: {safe_username}", status_code=409)
            logger.error(f"Failed to add admin user: {e}")
            raise

        logger.info(f"Added admin user {safe_username}")
        return safe_username

    @staticmethod
    def delete_user(username: str) -> None:
        """
        Delete an admin account.

        Raises:
            AdminUserError: When targeting the root account
        """
        if username == ROOT_USERNAME:
            raise AdminUserError("Cannot delete root admin")

        client = SupabaseClient.get_client()
        client.table("admin_users").delete().eq("username", username).execute()
        logger.info(f"Deleted admin user {username}")

    @staticmethod
    def change_password(username: str, current_password: str, new_password: str) -> None:
        """
        Replace an account's password after checking the current one.

        Raises:
            AdminUserError: If the account no longer exists (404)
            InvalidCredentialsError: If the current password is wrong
        """
        user = SupabaseClient.fetch_admin_user(username)
        if not user:
            raise AdminUserError("User not found", status_code=404)

        if not verify_password(current_password, user["salt"], user["password_hash"]):
            raise InvalidCredentialsError("Incorrect current password")

        salt = new_salt()
        client = SupabaseClient.get_client()
        client.table("admin_users").update({
            "salt": salt,
            "password_hash": hash_password(new_password, salt),
        }).eq("username", username).execute()
        logger.info(f"Password changed for {username}")
