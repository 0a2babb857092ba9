from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound


_CSS_ALIASES = frozenset({"css", "scss", "sass", "less"})
_PHP_ALIASES = frozenset({"php", "php3", "php4", "php5", "html+php"})
_JS_ALIASES = frozenset(
    {"javascript", "js", "typescript", "ts", "jsx", "tsx", "coffeescript", "html"}
)


@dataclass(frozen=True)
class LanguageInfo:
    """Language family of the edited file, as far as recognizer gating needs it."""

    name: str
    aliases: FrozenSet[str]

    @property
    def is_css_like(self) -> bool:
        return bool(self.aliases & _CSS_ALIASES)

    @property
    def is_php(self) -> bool:
        return bool(self.aliases & _PHP_ALIASES)

    @property
    def is_javascript(self) -> bool:
        return bool(self.aliases & _JS_ALIASES)


def normalize_extension(filename_or_ext: Optional[str]) -> Optional[str]:
    if not filename_or_ext:
        return None
    ext = filename_or_ext.rsplit(".", 1)[-1] if "." in filename_or_ext else filename_or_ext
    ext = ext.strip().lower()
    return ext or None


@lru_cache(maxsize=64)
def language_for_extension(extension: Optional[str]) -> Optional[LanguageInfo]:
    """Resolve a file extension through the pygments lexer registry."""
    ext = normalize_extension(extension)
    if ext is None:
        return None
    try:
        lexer = get_lexer_for_filename(f"buffer.{ext}")
    except ClassNotFound:
        return None
    aliases = frozenset(a.lower() for a in getattr(lexer, "aliases", ()))
    return LanguageInfo(name=lexer.name, aliases=aliases)


def is_css_like(extension: Optional[str]) -> bool:
    info = language_for_extension(extension)
    if info is not None:
        return info.is_css_like
    ext = normalize_extension(extension)
    return bool(ext and ext.endswith("css"))


def is_php(extension: Optional[str]) -> bool:
    info = language_for_extension(extension)
    return bool(info and info.is_php)


def is_javascript(extension: Optional[str]) -> bool:
    info = language_for_extension(extension)
    return bool(info and info.is_javascript)
