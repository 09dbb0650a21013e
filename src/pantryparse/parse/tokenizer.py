"""Lexical tokenizer and four-class tagger."""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Protocol

from pantryparse.normalize.numerals import (
    CHINESE_DIGITS,
    CHINESE_NUMERAL_CHARS,
    ENGLISH_NUMBER_WORDS,
    FRACTIONAL_WORDS,
    parse_chinese_number,
    parse_english_number,
    parse_number,
)
from pantryparse.normalize.units import unit_spellings
from pantryparse.parse.lexicon import han_vocabulary
from pantryparse.schemas import Locale


class LexClass(str, Enum):
    """Coarse lexical class driving the accumulator."""

    NUMBER = "number"
    NOUN = "noun"
    CONNECTOR = "connector"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    """A tagged token; NUMBER tokens carry their parsed value."""

    text: str
    lex_class: LexClass
    value: float | None = None

    @property
    def is_number(self) -> bool:
        return self.lex_class is LexClass.NUMBER


class LexicalTagger(Protocol):
    """Anything that splits text into tokens of the four lexical classes."""

    def tag(self, text: str) -> list[Token]: ...


# Verbs, conjunctions, prepositions, pronouns, determiners and time words
ENGLISH_CONNECTORS: frozenset[str] = frozenset(
    {
        "i", "we", "you", "they", "he", "she", "it", "me", "us", "my", "our",
        "bought", "buy", "buying", "got", "get", "have", "has", "had", "picked",
        "purchased", "added", "add", "need", "want", "grabbed", "is", "are", "was",
        "and", "or", "plus", "also", "with", "of", "the", "some", "few", "another",
        "to", "from", "for", "at", "in", "on", "by", "this", "that", "these", "those",
        "today", "yesterday", "tonight", "tomorrow", "just", "up", "then", "too",
        "please", "store", "market", "supermarket",
    }
)

CHINESE_CONNECTORS: frozenset[str] = frozenset(
    {
        "我", "我们", "你", "他", "她", "咱们",
        "买了", "买", "了", "有", "还有", "以及", "及", "和", "与", "跟", "同",
        "还", "又", "再", "也", "刚", "刚买", "刚刚", "的", "是", "在", "从",
        "今天", "昨天", "前天", "今日", "今晚", "今早", "刚才", "一些", "一点",
        "超市", "市场", "家里", "冰箱",
    }
)

# Tens words that combine with a following units word ("twenty five")
_TENS_VALUES = frozenset(v for v in ENGLISH_NUMBER_WORDS.values() if 20 <= v <= 90 and v % 10 == 0)

_HAN_RUN = r"[\u4e00-\u9fff]+"
_NUMBER = r"\d+(?:\.\d+)?(?:\s*/\s*\d+)?"
_WORD = r"[^\W\d_\u4e00-\u9fff]+(?:['-][^\W\d_\u4e00-\u9fff]+)*"


@lru_cache
def _master_pattern() -> re.Pattern[str]:
    multi_word_units = [s for s in unit_spellings() if " " in s]
    alternation = "|".join(re.escape(s).replace(r"\ ", r"\s+") for s in multi_word_units)
    return re.compile(
        rf"(?P<unit>\b(?:{alternation})\b)|(?P<number>{_NUMBER})|(?P<han>{_HAN_RUN})|(?P<word>{_WORD})",
        re.IGNORECASE,
    )


@lru_cache
def _han_units() -> frozenset[str]:
    return frozenset(s for s in unit_spellings() if re.fullmatch(_HAN_RUN, s))


@lru_cache
def _han_vocab() -> tuple[frozenset[str], int]:
    vocab = _han_units() | CHINESE_CONNECTORS | han_vocabulary()
    return vocab, max(len(w) for w in vocab)


def _is_numeral_digit(ch: str) -> bool:
    return ch in CHINESE_DIGITS and ch != "零"


class RuleBasedTagger:
    """
    Lexicon-driven tagger for English and Simplified Chinese.

    ASCII words are looked up in the number, fraction and connector tables;
    Han runs are segmented by longest match over units, numerals, connectors
    and the food lexicon. Unknown characters are grouped into one noun.
    """

    def __init__(self, locale: Locale | str = Locale.EN):
        self.locale = Locale.coerce(locale)

    def tag(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        if not text:
            return tokens
        for match in _master_pattern().finditer(text):
            kind = match.lastgroup
            chunk = match.group()
            if kind == "unit":
                tokens.append(Token(re.sub(r"\s+", " ", chunk.lower()), LexClass.NOUN))
            elif kind == "number":
                tokens.append(Token(chunk, LexClass.NUMBER, parse_number(chunk)))
            elif kind == "han":
                tokens.extend(self._segment_han(chunk, tokens[-1] if tokens else None))
            else:
                tokens.append(self._tag_word(chunk))
        return _merge_compounds(tokens)

    @staticmethod
    def _tag_word(word: str) -> Token:
        lowered = word.lower()
        if lowered in FRACTIONAL_WORDS:
            return Token(lowered, LexClass.NUMBER, FRACTIONAL_WORDS[lowered])
        number = parse_english_number(lowered)
        if number is not None:
            return Token(lowered, LexClass.NUMBER, float(number))
        if lowered in ENGLISH_CONNECTORS:
            return Token(lowered, LexClass.CONNECTOR)
        return Token(lowered, LexClass.NOUN)

    def _segment_han(self, run: str, previous: Token | None) -> list[Token]:
        vocab, max_len = _han_vocab()
        tokens: list[Token] = []
        unknown: list[str] = []
        i = 0

        def flush_unknown() -> None:
            if unknown:
                tokens.append(Token("".join(unknown), LexClass.NOUN))
                unknown.clear()

        while i < len(run):
            last = None if unknown else (tokens[-1] if tokens else previous)

            if run[i] == "半":
                flush_unknown()
                tokens.append(Token("半", LexClass.NUMBER, FRACTIONAL_WORDS["半"]))
                i += 1
                continue

            vocab_word = self._longest_vocab(run, i, vocab, max_len)
            numeral_end = self._numeral_end(run, i, vocab)
            numeral_len = numeral_end - i
            vocab_len = len(vocab_word) if vocab_word else 0

            # 两 right after a number is the tael unit
            liang_unit = run[i] == "两" and last is not None and last.is_number
            if numeral_len and numeral_len >= vocab_len and not liang_unit:
                flush_unknown()
                numeral = run[i:numeral_end]
                tokens.append(Token(numeral, LexClass.NUMBER, float(parse_chinese_number(numeral) or 0)))
                i = numeral_end
            elif vocab_word:
                flush_unknown()
                lex_class = LexClass.CONNECTOR if vocab_word in CHINESE_CONNECTORS else LexClass.NOUN
                tokens.append(Token(vocab_word, lex_class))
                i += vocab_len
            else:
                unknown.append(run[i])
                i += 1

        flush_unknown()
        return tokens

    @staticmethod
    def _longest_vocab(run: str, start: int, vocab: frozenset[str], max_len: int) -> str | None:
        for length in range(min(max_len, len(run) - start), 0, -1):
            candidate = run[start : start + length]
            if candidate in vocab:
                return candidate
        return None

    @staticmethod
    def _numeral_end(run: str, start: int, vocab: frozenset[str]) -> int:
        end = start
        while end < len(run) and run[end] in CHINESE_NUMERAL_CHARS:
            # Two plain digits in a row start a new number (两两 = two taels)
            if end > start and _is_numeral_digit(run[end]) and _is_numeral_digit(run[end - 1]):
                break
            end += 1
        # Give back a trailing numeral that starts a longer word (一千克 = 一 + 千克)
        while end - start >= 2 and any(
            run.startswith(word, end - 1) for word in vocab if len(word) >= 2 and word[0] == run[end - 1]
        ):
            end -= 1
        return end


def _is_word(token: Token, *words: str) -> bool:
    return token.text in words


def _number(text: str, value: float) -> Token:
    return Token(text, LexClass.NUMBER, value)


def _merge_compounds(tokens: list[Token]) -> list[Token]:
    """
    Fold multi-token quantities into single NUMBER tokens.

    - "half a" / "a half" -> 0.5
    - "N and a half" / "N and half" -> N + 0.5
    - "N 个 半" -> N + 0.5 followed by 个
    - "twenty five" -> 25
    """
    merged: list[Token] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        rest = tokens[i + 1 :]

        if _is_word(token, "half") and rest and _is_word(rest[0], "a", "an"):
            merged.append(_number("half a", 0.5))
            i += 2
            continue

        if _is_word(token, "a", "an") and rest and _is_word(rest[0], "half"):
            merged.append(_number("a half", 0.5))
            i += 2
            continue

        if token.is_number and token.value is not None:
            if (
                len(rest) >= 3
                and _is_word(rest[0], "and")
                and _is_word(rest[1], "a", "an")
                and _is_word(rest[2], "half")
            ):
                merged.append(_number(f"{token.text} and a half", token.value + 0.5))
                i += 4
                continue

            if len(rest) >= 2 and _is_word(rest[0], "and") and _is_word(rest[1], "half"):
                merged.append(_number(f"{token.text} and half", token.value + 0.5))
                i += 3
                continue

            if len(rest) >= 2 and _is_word(rest[0], "个") and _is_word(rest[1], "半"):
                merged.append(_number(f"{token.text}个半", token.value + 0.5))
                merged.append(rest[0])
                i += 3
                continue

            if (
                rest
                and rest[0].is_number
                and rest[0].value is not None
                and token.value in _TENS_VALUES
                and token.text.isalpha()
                and rest[0].text.isalpha()
                and 0 < rest[0].value < 10
            ):
                merged.append(_number(f"{token.text} {rest[0].text}", token.value + rest[0].value))
                i += 2
                continue

        merged.append(token)
        i += 1
    return merged


def tokenize(text: str, locale: Locale | str = Locale.EN) -> list[Token]:
    """Tag text with the default rule-based tagger."""
    return RuleBasedTagger(locale).tag(text)
