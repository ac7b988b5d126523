# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for fetching:
# - Content items (all, by sector, by id)
# - Global config documents (portal config and sector list)
# - Admin accounts
#
# Writes live in the service layer (core/services), which uses get_client().
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   items = SupabaseClient.fetch_items(sector="books")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# global_config rows
CONFIG_ROW_ID = 1
SECTORS_ROW_ID = 2

# PostgREST code for "no rows" on .single()
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Error messages tell HOW to fix the problem, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        # Fetch every item of a sector
        items = SupabaseClient.fetch_items(sector="resources")

        # Fetch the portal configuration document
        config = SupabaseClient.fetch_config_document(CONFIG_ROW_ID) or {}
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Content Items
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_items(cls, sector: str | None = None) -> list[dict[str, Any]]:
        """
        Fetch content items.

        Rows come back in storage order (order_index asc, then date desc);
        display order is decided by lib.ordering.

        Args:
            sector: Restrict to one sector

        Returns:
            List of item row dicts

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table("items").select("*")
            if sector:
                query = query.eq("sector", sector)
            response = (
                query
                .order("order_index", desc=False)
                .order("date", desc=True)
                .execute()
            )

            items = response.data or []
            logger.debug(f"Fetched {len(items)} items (sector={sector})")
            return items

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch items: {e}",
                code="FETCH_ITEMS_FAILED",
                suggestion="Check that the items table exists and is accessible",
                details={"sector": sector}
            )

    @classmethod
    def fetch_item(cls, item_id: str) -> dict[str, Any] | None:
        """
        Fetch a single item by ID.

        Returns:
            Item dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("items")
                .select("*")
                .eq("id", item_id)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch item: {e}",
                code="FETCH_ITEM_FAILED",
                suggestion="Check that the item id exists",
                details={"item_id": item_id}
            )

    # -------------------------------------------------------------------------
    # Global Config
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_config_document(cls, row_id: int) -> Any | None:
        """
        Fetch the JSON document stored in a global_config row.

        Row 1 holds the portal config object, row 2 the sector list.

        Returns:
            The parsed `config` column, or None if the row doesn't exist

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("global_config")
                .select("config")
                .eq("id", row_id)
                .maybe_single()
                .execute()
            )
            # maybe_single() returns None instead of a response on no rows in some versions
            data = response.data if response is not None else None
            return data.get("config") if data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch config row {row_id}: {e}",
                code="FETCH_CONFIG_FAILED",
                suggestion="Check that the global_config table exists",
                details={"row_id": row_id}
            )

    @classmethod
    def save_config_document(cls, row_id: int, document: Any) -> None:
        """
        Replace the JSON document stored in a global_config row.

        Raises:
            SupabaseClientError: If the upsert fails
        """
        client = cls.get_client()

        try:
            client.table("global_config").upsert({"id": row_id, "config": document}).execute()
            logger.info(f"Saved global_config row {row_id}")
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save config row {row_id}: {e}",
                code="SAVE_CONFIG_FAILED",
                suggestion="Check that the service key can write global_config",
                details={"row_id": row_id}
            )

    # -------------------------------------------------------------------------
    # Admin Accounts
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_admin_user(cls, username: str) -> dict[str, Any] | None:
        """
        Fetch an admin account, including its salt and password hash.

        Returns:
            Account dict, or None if no such user

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("admin_users")
                .select("*")
                .eq("username", username)
                .maybe_single()
                .execute()
            )
            return response.data if response is not None else None

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch admin user: {e}",
                code="FETCH_ADMIN_FAILED",
                suggestion="Check that the admin_users table exists",
                details={"username": username}
            )
