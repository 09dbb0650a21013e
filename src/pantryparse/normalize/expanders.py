"""Text rewriters that run before tokenization."""

import re
from collections.abc import Callable

from pantryparse.normalize.numerals import (
    ARABIC_NUMBER,
    CHINESE_NUMERAL,
    ENGLISH_NUMBER_WORD,
    parse_number,
)
from pantryparse.normalize.units import (
    CONTAINER_UNITS,
    WEIGHT_UNITS,
    round_half_up,
    unit_alternation,
)
from pantryparse.schemas import Locale

JIN_GRAMS = WEIGHT_UNITS["斤"]
LIANG_GRAMS = WEIGHT_UNITS["两"]
POUND_GRAMS = WEIGHT_UNITS["lb"]
OUNCE_GRAMS = WEIGHT_UNITS["oz"]

# An omitted tael count ("三斤两") means half a tael
ELLIPTICAL_LIANG = 0.5


def _number(text: str) -> float:
    value = parse_number(text)
    return value if value is not None else 0.0


_ZH_NUM = rf"(?:{ARABIC_NUMBER}|{CHINESE_NUMERAL})"
_ANY_NUM = rf"(?:{ARABIC_NUMBER}|{ENGLISH_NUMBER_WORD}|{CHINESE_NUMERAL}|半|an|a)"

JinLiang = Callable[[re.Match[str]], tuple[float, float]]

# Most specific first; each resolver returns (catties, taels)
_ZH_COMPOSITE_PATTERNS: tuple[tuple[re.Pattern[str], JinLiang], ...] = (
    (re.compile(rf"({_ZH_NUM})\s*斤\s*半两"), lambda m: (_number(m.group(1)), 0.5)),
    (
        re.compile(rf"({_ZH_NUM})\s*斤\s*({_ZH_NUM})\s*两"),
        lambda m: (_number(m.group(1)), _number(m.group(2))),
    ),
    (re.compile(rf"({_ZH_NUM})\s*斤两"), lambda m: (_number(m.group(1)), ELLIPTICAL_LIANG)),
    (re.compile(r"半斤\s*半两"), lambda m: (0.5, 0.5)),
    (re.compile(rf"半斤\s*({_ZH_NUM})\s*两"), lambda m: (0.5, _number(m.group(1)))),
    (re.compile(r"半斤两"), lambda m: (0.5, ELLIPTICAL_LIANG)),
    (re.compile(rf"({_ZH_NUM})\s*斤半(?!两)"), lambda m: (_number(m.group(1)) + 0.5, 0.0)),
)

_EN_COMPOSITE_RE = re.compile(
    rf"\b({ARABIC_NUMBER}|{ENGLISH_NUMBER_WORD})\s*(?:pounds?|lbs?)\s*(?:and\s+)?"
    rf"({ARABIC_NUMBER}|{ENGLISH_NUMBER_WORD})\s*(?:ounces?|oz)\b"
)

_CONTAINER_ALTERNATION = "|".join(
    re.escape(c) for c in sorted(CONTAINER_UNITS, key=len, reverse=True)
)

_CONTAINER_VOLUME_RE = re.compile(
    rf"(?<![\w.])({_ANY_NUM})\s*(?:{_CONTAINER_ALTERNATION})\s*(?:of\s+)?"
    rf"(\d+(?:\.\d+)?)\s*(ml|mL|毫升|liters?|litres?|l|L|升|gallons?|加仑|cups?|杯)(?![a-zA-Z])"
)

_GLUE_RE = re.compile(rf"(\d)({unit_alternation()})(?![a-zA-Z])", re.IGNORECASE)


def _jin_liang_grams(jin: float, liang: float) -> int:
    return round_half_up(jin * JIN_GRAMS + liang * LIANG_GRAMS)


def _expand_zh_composite(text: str) -> str:
    for pattern, resolve in _ZH_COMPOSITE_PATTERNS:
        text = pattern.sub(lambda m, resolve=resolve: f"{_jin_liang_grams(*resolve(m))} 克", text)
    return text


def _expand_en_composite(text: str) -> str:
    def rewrite(match: re.Match[str]) -> str:
        grams = _number(match.group(1)) * POUND_GRAMS + _number(match.group(2)) * OUNCE_GRAMS
        return f"{round_half_up(grams)} g"

    return _EN_COMPOSITE_RE.sub(rewrite, text)


def expand_composite_weights(text: str, locale: Locale | str = Locale.EN) -> str:
    """
    Rewrite two-tier weights into a single gram amount.

    Examples (zh-Hans):
        "3斤5两牛肉" -> "1750 克牛肉"
        "2斤半" -> "1250 克"
        "半斤两" -> "275 克"

    Examples (en):
        "2 pounds 3 ounces" -> "992 g"
    """
    if not text:
        return ""
    if Locale.coerce(locale) is Locale.ZH_HANS:
        return _expand_zh_composite(text)
    return _expand_en_composite(text)


def expand_container_volume(text: str) -> str:
    """
    Split "<N> <container> <volume>" into N independent volume amounts.

    Example:
        "two bottles 400ml" -> "400ml 400ml"
        "3瓶500毫升" -> "500毫升 500毫升 500毫升"
    """
    if not text:
        return ""

    def rewrite(match: re.Match[str]) -> str:
        count = int(_number(match.group(1)))
        volume = f"{match.group(2)}{match.group(3)}"
        if count <= 0:
            return volume
        return " ".join([volume] * count)

    return _CONTAINER_VOLUME_RE.sub(rewrite, text)


def glue_number_units(text: str) -> str:
    """Insert a space between a digit run and a unit spelling ("20lbs" -> "20 lbs")."""
    if not text:
        return ""
    return _GLUE_RE.sub(r"\1 \2", text)


def expand(text: str, locale: Locale | str = Locale.EN) -> str:
    """Run every expander in order."""
    text = expand_composite_weights(text, locale)
    text = expand_container_volume(text)
    return glue_number_units(text)
