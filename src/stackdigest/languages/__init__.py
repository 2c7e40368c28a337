from stackdigest.languages.base import Dialect
from stackdigest.languages.registry import (
    dialect_for_path,
    get_dialect,
    get_language_for_file,
    supported_extensions,
)

__all__ = [
    "Dialect",
    "dialect_for_path",
    "get_dialect",
    "get_language_for_file",
    "supported_extensions",
]
