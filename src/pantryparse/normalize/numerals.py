"""Numeral parsing for English number words and Chinese numerals."""

import re

ENGLISH_NUMBER_WORDS: dict[str, int] = {
    "zero": 0,
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
    "hundred": 100,
}

# Words that are only ever a fraction of one unit
FRACTIONAL_WORDS: dict[str, float] = {
    "half": 0.5,
    "quarter": 0.25,
    "半": 0.5,
}

CHINESE_DIGITS: dict[str, int] = {
    "零": 0,
    "一": 1,
    "二": 2,
    "两": 2,
    "俩": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}

CHINESE_MULTIPLIERS: dict[str, int] = {"十": 10, "百": 100, "千": 1000}

CHINESE_NUMERAL_CHARS = "".join(CHINESE_DIGITS) + "".join(CHINESE_MULTIPLIERS)

# Regex fragments shared by the expanders and the date patterns
ARABIC_NUMBER = r"\d+(?:\.\d+)?"
CHINESE_NUMERAL = rf"[{CHINESE_NUMERAL_CHARS}]+"
ENGLISH_NUMBER_WORD = (
    r"(?:" + "|".join(sorted((w for w in ENGLISH_NUMBER_WORDS if len(w) > 2), key=len, reverse=True)) + r")"
)

_DIGITS_RE = re.compile(r"^\d+(?:\.\d+)?$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")


def parse_chinese_number(text: str) -> int | None:
    """
    Parse a Chinese numeral such as 三, 十二, 二十三, 两百五十 or 一千零五.

    Returns None when the text contains anything but numeral characters.
    """
    if not text or any(ch not in CHINESE_NUMERAL_CHARS for ch in text):
        return None

    total = 0
    current = 0
    for ch in text:
        if ch in CHINESE_DIGITS:
            current = CHINESE_DIGITS[ch]
        else:
            multiplier = CHINESE_MULTIPLIERS[ch]
            # A bare 十 at the start means ten
            total += (current or 1) * multiplier
            current = 0
    return total + current


def parse_english_number(text: str) -> int | None:
    """Parse "three", "twenty-five" or "twenty five" into an integer."""
    words = re.split(r"[\s-]+", text.strip().lower())
    if not words or any(w not in ENGLISH_NUMBER_WORDS for w in words):
        return None
    if len(words) == 1:
        return ENGLISH_NUMBER_WORDS[words[0]]
    values = [ENGLISH_NUMBER_WORDS[w] for w in words]
    # Only "tens + units" compounds are meaningful in grocery talk
    if len(values) == 2 and values[0] % 10 == 0 and 20 <= values[0] <= 90 and 0 < values[1] < 10:
        return values[0] + values[1]
    return None


def parse_number(text: str) -> float | None:
    """
    Parse any numeric token into a float.

    Handles:
    - "3", "1.5"
    - "1/2"
    - "three", "twenty-five", "a"
    - "half", "半"
    - "三", "十二"
    """
    if not text:
        return None
    token = text.strip().lower()

    if _DIGITS_RE.match(token):
        return float(token)

    frac_match = _FRACTION_RE.match(token)
    if frac_match:
        denom = int(frac_match.group(2))
        if denom == 0:
            return None
        return int(frac_match.group(1)) / denom

    if token in FRACTIONAL_WORDS:
        return FRACTIONAL_WORDS[token]

    english = parse_english_number(token)
    if english is not None:
        return float(english)

    chinese = parse_chinese_number(token)
    if chinese is not None:
        return float(chinese)

    return None


def parse_count(text: str) -> int | None:
    """Parse a whole number of days, months or containers."""
    value = parse_number(text)
    if value is None:
        return None
    return int(value)
