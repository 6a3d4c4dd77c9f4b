"""Key terms module exports."""

from .models import KeyTermEntry, KeyTermsResult
from .parser import extract_key_terms, key_term_extractor, split_formulas

__all__ = [
    "KeyTermEntry",
    "KeyTermsResult",
    "extract_key_terms",
    "key_term_extractor",
    "split_formulas",
]
