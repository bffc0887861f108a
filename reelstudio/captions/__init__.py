"""Caption text helpers used by the script editor."""

from .ass_text import ass_text_to_plain, normalize

__all__ = ["ass_text_to_plain", "normalize"]
