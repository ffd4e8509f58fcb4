import re
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from resume_ats.helpers.vocabulary import SYNONYM_TABLE

_STRIPPED_CHARS = re.compile(r"[.\-_]")
_WHITESPACE = re.compile(r"\s+")

SynonymTable = Mapping[str, Tuple[str, ...]]


def normalize_text(text: str) -> str:
    """Lowercase, drop '.', '-' and '_', collapse whitespace runs to one space."""
    return _WHITESPACE.sub(" ", _STRIPPED_CHARS.sub("", text.lower()))


def build_synonym_table(
    extra: Optional[Mapping[str, Iterable[str]]] = None,
    base: SynonymTable = SYNONYM_TABLE,
) -> SynonymTable:
    """
    Return a new read-only synonym table with ``extra`` concepts merged over ``base``.

    Variants of a concept already in ``base`` are appended, not replaced.
    """
    merged = {key: tuple(variants) for key, variants in base.items()}
    for key, variants in (extra or {}).items():
        if isinstance(variants, str):
            variants = [variants]
        current = list(merged.get(key, ()))
        current.extend(v for v in variants if v not in current)
        merged[key] = tuple(current)
    return MappingProxyType(merged)


def _concept_names_term(key: str, variants: Tuple[str, ...], normalized_term: str) -> bool:
    if normalize_text(key) == normalized_term:
        return True
    return any(normalize_text(v) == normalized_term for v in variants)


def text_contains(resume_normalized: str, term: str, synonyms: SynonymTable = SYNONYM_TABLE) -> bool:
    """
    Check whether a skill/keyword appears in already-normalized resume text.

    Direct substring match first; otherwise any concept the term names in the
    synonym table counts as present when one of its variants appears.
    """
    normalized_term = normalize_text(term)
    if normalized_term in resume_normalized:
        return True

    for key, variants in synonyms.items():
        if not _concept_names_term(key, variants, normalized_term):
            continue
        if any(normalize_text(v) in resume_normalized for v in variants):
            return True

    return False
