"""Company name normalization and domain matching."""

from .normalizer import NameNormalizer, NormalizedName, normalize_name, normalize_name_tokens, normalize_domain
from .matcher import DomainMatcher, find_match

__all__ = [
    'NameNormalizer', 'NormalizedName', 'normalize_name', 'normalize_name_tokens',
    'normalize_domain', 'DomainMatcher', 'find_match'
]
