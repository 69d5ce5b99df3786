"""Core business services for offline image patching."""

from .config_service import ConfigService
from .precondition_service import PreconditionService
from .update_query_service import UpdateQueryService
from .content_resolver import ContentResolver
from .image_servicing_service import ImageServicingService

__all__ = [
    'ConfigService',
    'PreconditionService',
    'UpdateQueryService',
    'ContentResolver',
    'ImageServicingService'
]
