from .chunk import chunk_children
from .ids import is_page_id, validate_page_id
from .redact import mask_token, redact
from .text_split import split_string

__all__ = [
    "chunk_children",
    "split_string",
    "is_page_id",
    "validate_page_id",
    "mask_token",
    "redact",
]
