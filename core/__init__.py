# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the portal's business logic:
# - models/: Pydantic schemas for items, sectors, lecture rules, admins
# - services/: Supabase-backed operations used by the routers
# =============================================================================
