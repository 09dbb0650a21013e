"""Tokenizing, accumulating and validating food components."""

from pantryparse.parse.accumulator import AccumulatorState, ItemAccumulator, RawComponent, accumulate
from pantryparse.parse.expiration import (
    ExpirationExtractor,
    ExpirationHint,
    extract_expiration,
    extract_purchase_date,
    strip_expiration_phrases,
)
from pantryparse.parse.lexicon import canonical_name, is_food_name, is_known_food, is_liquid
from pantryparse.parse.tokenizer import LexClass, LexicalTagger, RuleBasedTagger, Token, tokenize
from pantryparse.parse.validation import is_noise, validate_name

__all__ = [
    "AccumulatorState",
    "ExpirationExtractor",
    "ExpirationHint",
    "ItemAccumulator",
    "LexClass",
    "LexicalTagger",
    "RawComponent",
    "RuleBasedTagger",
    "Token",
    "accumulate",
    "canonical_name",
    "extract_expiration",
    "extract_purchase_date",
    "is_food_name",
    "is_known_food",
    "is_liquid",
    "is_noise",
    "strip_expiration_phrases",
    "tokenize",
    "validate_name",
]
