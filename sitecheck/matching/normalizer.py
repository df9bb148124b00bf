"""
Company name and URL domain normalization.

Both company names and URL domains are reduced to a canonical lowercase
ASCII form so that they can be compared with plain substring checks.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


# Characters folded explicitly; anything else that decomposes to a base letter
# plus combining marks is handled by Unicode decomposition.
DIACRITIC_TABLE: Dict[str, str] = {
    'å': 'a',
    'ä': 'a',
    'ö': 'o',
    'é': 'e',
    'è': 'e',
    'ü': 'u',
    'ø': 'o',
    'æ': 'ae',
    'ß': 'ss',
}

COMPANY_SUFFIXES: FrozenSet[str] = frozenset({
    'ab', 'hb', 'kb', 'ek', 'for', 'enskild', 'firma', 'handelsbolag',
    'kommanditbolag', 'aktiebolag', 'ekonomisk', 'forening',
})

STOP_WORDS: FrozenSet[str] = frozenset({
    'och', 'i', 'the', 'and', 'of', 'sweden', 'sverige',
})

_NON_ALNUM_OR_SPACE = re.compile(r'[^a-z0-9\s]')
_NON_ALNUM = re.compile(r'[^a-z0-9]')
_WHITESPACE = re.compile(r'\s+')
_SCHEME = re.compile(r'^https?://', re.IGNORECASE)
_WWW = re.compile(r'^www\.', re.IGNORECASE)


@dataclass(frozen=True)
class NormalizedName:
    """Canonical form of a company name."""
    text: str
    tokens: Tuple[str, ...]

    def significant_tokens(self, min_length: int = 3) -> Tuple[str, ...]:
        """Tokens long enough to anchor a domain match."""
        return tuple(token for token in self.tokens if len(token) >= min_length)


class NameNormalizer:
    """
    Canonicalize company names and URL domains into comparable tokens.

    Names are folded to ASCII, stripped of punctuation and tokenized, with
    organizational suffixes and stop words removed. Domains are reduced to
    their host and squashed into a single alphanumeric string.
    """

    def __init__(self, ignored_words: Optional[Iterable[str]] = None,
                 diacritic_table: Optional[Dict[str, str]] = None):
        """
        Initialize the normalizer.

        Args:
            ignored_words: Words dropped from names (defaults to company
                suffixes plus stop words)
            diacritic_table: Explicit character folds applied before Unicode
                decomposition
        """
        if ignored_words is None:
            ignored_words = COMPANY_SUFFIXES | STOP_WORDS
        self.ignored_words = frozenset(word.lower() for word in ignored_words)
        self.diacritic_table = dict(diacritic_table or DIACRITIC_TABLE)

    def fold_diacritics(self, text: str) -> str:
        """Lowercase text and fold accented characters to base Latin letters."""
        text = text.lower()
        text = ''.join(self.diacritic_table.get(char, char) for char in text)
        decomposed = unicodedata.normalize('NFD', text)
        return ''.join(char for char in decomposed if not unicodedata.combining(char))

    def normalize_name_tokens(self, raw: Optional[str]) -> NormalizedName:
        """Normalize a company name and return both the text and its tokens.

        Args:
            raw: Company name as found in the directory

        Returns:
            NormalizedName with the space-joined canonical name and its tokens
        """
        if not raw:
            return NormalizedName(text='', tokens=())

        text = self.fold_diacritics(raw)
        text = _NON_ALNUM_OR_SPACE.sub('', text)
        text = _WHITESPACE.sub(' ', text).strip()

        tokens = tuple(token for token in text.split(' ')
                       if token and token not in self.ignored_words)
        return NormalizedName(text=' '.join(tokens), tokens=tokens)

    def normalize_name(self, raw: Optional[str]) -> str:
        """Normalize a company name into its canonical space-joined form."""
        return self.normalize_name_tokens(raw).text

    @staticmethod
    def extract_domain(url: Optional[str]) -> str:
        """Reduce a URL to its host, without scheme, ``www.``, path or port.

        Args:
            url: URL as returned by the search provider

        Returns:
            Host portion of the URL (original case), or empty string
        """
        if not url:
            return ''

        domain = _SCHEME.sub('', url.strip())
        domain = _WWW.sub('', domain)

        for separator in ('/', '?', '#'):
            domain = domain.split(separator, 1)[0]

        # Remove port if present
        domain = domain.split(':', 1)[0]

        return domain

    def normalize_domain(self, url: Optional[str]) -> str:
        """Normalize a URL's domain into a single lowercase alphanumeric string."""
        domain = self.extract_domain(url)
        if not domain:
            return ''
        return _NON_ALNUM.sub('', self.fold_diacritics(domain))


_default_normalizer = NameNormalizer()


def normalize_name(raw: Optional[str]) -> str:
    """Normalize a company name with the default word lists."""
    return _default_normalizer.normalize_name(raw)


def normalize_name_tokens(raw: Optional[str]) -> NormalizedName:
    """Normalize a company name with the default word lists, keeping tokens."""
    return _default_normalizer.normalize_name_tokens(raw)


def normalize_domain(url: Optional[str]) -> str:
    """Normalize a URL's domain with the default diacritic table."""
    return _default_normalizer.normalize_domain(url)


def extract_domain(url: Optional[str]) -> str:
    """Extract the host portion of a URL."""
    return NameNormalizer.extract_domain(url)
