# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .admin_service import AdminService
from .audit_service import AuditService, VisitorService
from .backup_service import BackupService
from .config_service import ConfigService
from .item_service import ItemService
from .notification_service import NotificationService
from .storage_service import StorageService

__all__ = [
    "AdminService",
    "AuditService",
    "VisitorService",
    "BackupService",
    "ConfigService",
    "ItemService",
    "NotificationService",
    "StorageService",
]
