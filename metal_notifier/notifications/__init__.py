from .dispatch import DispatchLoop, DispatchResult, RateBudget
from .email_service import EmailService, NotificationError, RateLimitError
from .templates import EmailTemplate, RenderedEmail

__all__ = [
    "DispatchLoop",
    "DispatchResult",
    "EmailService",
    "EmailTemplate",
    "NotificationError",
    "RateBudget",
    "RateLimitError",
    "RenderedEmail",
]
