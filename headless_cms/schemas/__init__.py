from .content_model import ContentModel, ContentModelField

__all__ = [
    "ContentModel",
    "ContentModelField",
]
