from .content_model import CmsContentModel, ContentEntry
from .user import User

__all__ = [
    "CmsContentModel",
    "ContentEntry",
    "User",
]
