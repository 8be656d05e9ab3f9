"""Shared constants for fastjade."""

from __future__ import annotations

# Elements that never get a closing tag or children
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose nested lines are raw text (no markup parsing)
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})

DEFAULT_DOCTYPE = "<!DOCTYPE html>"

DOCTYPES: dict[str, str] = {
    "html": DEFAULT_DOCTYPE,
    "5": DEFAULT_DOCTYPE,
    "default": DEFAULT_DOCTYPE,
    "xml": '<?xml version="1.0" encoding="utf-8" ?>',
    "transitional": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">'
    ),
    "strict": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">'
    ),
    "frameset": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Frameset//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-frameset.dtd">'
    ),
    "1.1": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" '
        '"http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">'
    ),
    "basic": (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML Basic 1.1//EN" '
        '"http://www.w3.org/TR/xhtml-basic/xhtml-basic11.dtd">'
    ),
    "mobile": (
        '<!DOCTYPE html PUBLIC "-//WAPFORUM//DTD XHTML Mobile 1.2//EN" '
        '"http://www.openmobilealliance.org/tech/DTD/xhtml-mobile12.dtd">'
    ),
}

# Statement keywords that always open an indented block
COMPOUND_KEYWORDS: frozenset[str] = frozenset(
    {"if", "elif", "else", "for", "while", "with", "try", "except", "finally", "def"}
)

# Clauses that continue the preceding compound statement
CONTINUATION_KEYWORDS: frozenset[str] = frozenset({"elif", "else", "except", "finally"})

UNDEFINED_TEXT = "undefined"
