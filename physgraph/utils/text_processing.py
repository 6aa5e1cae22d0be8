"""Text normalization, slugs, and concept-link extraction."""

from __future__ import annotations

import hashlib
import re
import unicodedata

# [[Term]] wiki links and [Term](/concept/...) markdown links
_DOUBLE_BRACKET = re.compile(r"\[\[([\s\S]*?)\]\]")
_CONCEPT_LINK = re.compile(r"\[([^\[\]]*?)\]\(/concept/[^)]*\)")


def normalize_text(text: str) -> str:
    """Normalize unicode, collapse whitespace, strip."""
    text = unicodedata.normalize("NFKC", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def slugify(text: str) -> str:
    """Lowercase ASCII slug; empty when nothing alphanumeric survives."""
    slug = re.sub(r"[^a-z0-9]+", "-", normalize_text(text).lower())
    return slug.strip("-")


def content_hash(text: str) -> str:
    """SHA-256 hash of text content, truncated for use as a cache key."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def extract_concept_terms(content: str) -> list[str]:
    """Return the distinct concept labels referenced in ``content``.

    Double-bracket terms come first, then concept links, each in the order
    they appear. Blank terms are dropped.
    """
    found = _DOUBLE_BRACKET.findall(content) + _CONCEPT_LINK.findall(content)
    seen: set[str] = set()
    terms: list[str] = []
    for raw in found:
        term = raw.strip()
        if term and term not in seen:
            seen.add(term)
            terms.append(term)
    return terms
