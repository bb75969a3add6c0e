"""Country-name canonicalization.

Source extracts spell the same territory differently ('Hong Kong, China' in
the tourism files, 'China, Hong Kong Special Administrative Region' in the
SDG files), use long official names, and some cells carry UTF-8 text that was
decoded as code page 437 ('COTE D┬┤IVOIRE', 'CURA├çAO'). Every variant is
mapped onto one uppercase vocabulary through alias data.
"""
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Pattern, Tuple

from src.config.normalization_config import HEADER_PREFIXES
from .cleaners import clean_text


# Box-drawing block: the signature of UTF-8 bytes read as cp437
_MOJIBAKE_RE = re.compile('[─-╿]')

APOSTROPHE_VARIANTS = {
    '´': "'",   # acute accent
    '‘': "'",
    '’': "'",
    'ʼ': "'",
    '′': "'",
    '`': "'",
}
_APOSTROPHE_TABLE = str.maketrans(APOSTROPHE_VARIANTS)


def repair_mojibake(text: str) -> str:
    """ Undo UTF-8 text that was decoded as cp437; unchanged if not applicable """
    if not _MOJIBAKE_RE.search(text):
        return text
    try:
        return text.encode('cp437').decode('utf-8')
    except (UnicodeEncodeError, UnicodeDecodeError):
        return text


def fold_name(text: str) -> str:
    """
    Matching key for a country name: encoding repaired, apostrophes unified,
    diacritics removed, uppercased, whitespace collapsed.
    """
    text = repair_mojibake(text).translate(_APOSTROPHE_TABLE)
    text = unicodedata.normalize('NFKD', text)
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    return ' '.join(text.upper().split())


def _literal_key(text: str) -> str:
    return ' '.join(text.upper().split())


def _compile_pattern(pattern: str) -> Pattern:
    """ '*' is a wildcard, everything else matches literally """
    parts = [re.escape(part) for part in pattern.split('*')]
    return re.compile('^' + '.*'.join(parts) + '$', re.DOTALL)


@dataclass(frozen=True)
class CountryAlias:
    """One (pattern -> canonical) rule."""
    pattern: str
    canonical: str
    folded: Pattern = field(init=False, compare=False, repr=False)
    literal: Pattern = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'folded', _compile_pattern(fold_name(self.pattern)))
        object.__setattr__(self, 'literal', _compile_pattern(_literal_key(self.pattern)))


class CountryCanonicalizer:
    """Maps raw country names onto the canonical uppercase vocabulary."""

    def __init__(
        self,
        aliases: Iterable[Tuple[str, str]] = (),
        header_prefixes: Iterable[str] = HEADER_PREFIXES
    ):
        self.aliases: List[CountryAlias] = []
        self.header_prefixes = tuple(
            fold_name(prefix.lstrip('"')) for prefix in header_prefixes
        )
        for pattern, canonical in aliases:
            self.add_alias(pattern, canonical)

    def add_alias(self, pattern: str, canonical: str) -> None:
        self.aliases.append(CountryAlias(pattern, canonical.upper()))

    def is_header(self, name: str) -> bool:
        """ Footnote/header rows embedded in the extract ('Source: ...') """
        key = fold_name(name.lstrip('"'))
        return any(key.startswith(prefix) for prefix in self.header_prefixes)

    def lookup(self, name: str) -> Optional[str]:
        """ Alias match on the repaired name first, then on the literal spelling """
        folded = fold_name(name)
        for alias in self.aliases:
            if alias.folded.match(folded):
                return alias.canonical

        literal = _literal_key(name)
        for alias in self.aliases:
            if alias.literal.match(literal):
                return alias.canonical
        return None

    def canonicalize(self, value: Any) -> Optional[str]:
        name = clean_text(value)
        if name is None:
            return None

        if self.is_header(name):
            return None

        canonical = self.lookup(name)
        if canonical is not None:
            return canonical

        return repair_mojibake(name).upper()

    __call__ = canonicalize


def normalize_country(value: Any, canonicalizer: CountryCanonicalizer) -> Optional[str]:
    """ Canonical uppercase country name, or None for blanks and header rows """
    return canonicalizer.canonicalize(value)
