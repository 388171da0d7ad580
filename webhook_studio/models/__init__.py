"""ORM models exposed for external modules."""
from .base import Base
from .category import DEFAULT_CATEGORY_COLOR, Category
from .webhook import Webhook, WebhookMethod
from .webhook_response import ResponseDataFormat, WebhookResponse

__all__ = [
    "Base",
    "Category",
    "DEFAULT_CATEGORY_COLOR",
    "Webhook",
    "WebhookMethod",
    "WebhookResponse",
    "ResponseDataFormat",
]
