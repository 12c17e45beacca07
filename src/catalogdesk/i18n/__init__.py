from .messages import BUILTIN_MESSAGES, MessageCatalog

__all__ = ["BUILTIN_MESSAGES", "MessageCatalog"]
