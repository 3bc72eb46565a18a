# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .transfer_service import EXAMPLE_CSV, EXPORT_MEDIA_TYPE, TransferService

__all__ = [
    "EXAMPLE_CSV",
    "EXPORT_MEDIA_TYPE",
    "TransferService",
]
