"""
Expiration and purchase date extraction.

Only explicit statements produce a date. The extractor tries three pattern
families in order and the first family with a match wins:

1. Relative keywords ("expires tomorrow", "明天过期")
2. Absolute month/day ("expires on October 25", "10月25号过期")
3. Day or week offsets ("expires in 3 days", "3天后过期", "保质期7天")
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from pantryparse.logging_config import get_logger
from pantryparse.normalize.numerals import CHINESE_NUMERAL, ENGLISH_NUMBER_WORD, parse_count
from pantryparse.schemas import Locale

logger = get_logger(__name__)

DateLike = date | datetime

MONTHS: dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

EN_RELATIVE_OFFSETS: dict[str, int] = {
    "today": 0,
    "tonight": 0,
    "tomorrow": 1,
    "day after tomorrow": 2,
}

ZH_RELATIVE_OFFSETS: dict[str, int] = {
    "今天": 0,
    "今晚": 0,
    "明天": 1,
    "后天": 2,
    "大后天": 3,
}

EN_PERIOD_DAYS: dict[str, int] = {"day": 1, "days": 1, "week": 7, "weeks": 7}
ZH_PERIOD_DAYS: dict[str, int] = {
    "天": 1,
    "周": 7,
    "星期": 7,
    "个星期": 7,
    "礼拜": 7,
    "个礼拜": 7,
}


@dataclass(frozen=True)
class ExpirationHint:
    """An explicitly stated expiration date and where it was said."""

    date: date
    start: int
    end: int


Resolver = Callable[[re.Match[str], date], date | None]


@dataclass(frozen=True)
class _Rule:
    pattern: re.Pattern[str]
    resolve: Resolver


# =============================================================================
# Resolvers
# =============================================================================


def _today(now: DateLike) -> date:
    return now.date() if isinstance(now, datetime) else now


def _month_day(
    today: date,
    month: int,
    day: int,
    year: int | None = None,
) -> date | None:
    """Build a date, rolling into next year when no year was given and it already passed."""
    if year is not None and year < 100:
        year += 2000
    try:
        candidate = date(year or today.year, month, day)
        if year is None and candidate < today:
            candidate = candidate.replace(year=today.year + 1)
    except ValueError:
        return None
    return candidate


def _number(text: str | None) -> int | None:
    if text is None:
        return None
    return parse_count(text)


def _en_relative(match: re.Match[str], today: date) -> date | None:
    keyword = re.sub(r"\s+", " ", match.group("when").lower())
    keyword = keyword.removeprefix("the ")
    return today + timedelta(days=EN_RELATIVE_OFFSETS[keyword])


def _zh_relative(match: re.Match[str], today: date) -> date | None:
    return today + timedelta(days=ZH_RELATIVE_OFFSETS[match.group("when")])


def _named_month(match: re.Match[str], today: date) -> date | None:
    month = MONTHS[match.group("month").lower().rstrip(".")]
    day = int(match.group("day"))
    year = match.group("year")
    return _month_day(today, month, day, int(year) if year else None)


def _numeric_month(match: re.Match[str], today: date) -> date | None:
    month = _number(match.group("month"))
    day = _number(match.group("day"))
    if month is None or day is None:
        return None
    year = match.groupdict().get("year")
    return _month_day(today, month, day, int(year) if year else None)


def _en_offset(match: re.Match[str], today: date) -> date | None:
    count = _number(match.group("n"))
    if count is None:
        return None
    return today + timedelta(days=count * EN_PERIOD_DAYS[match.group("period").lower()])


def _zh_offset(match: re.Match[str], today: date) -> date | None:
    count = _number(match.group("n"))
    if count is None:
        return None
    return today + timedelta(days=count * ZH_PERIOD_DAYS[match.group("period")])


# =============================================================================
# Patterns
# =============================================================================

_EN_VERB = (
    r"(?:(?:it\s+)?(?:will\s+)?expir(?:es|ed|e|y|ing)|goes\s+bad|go\s+bad|goes\s+off|"
    r"best\s+before|use\s+by|good\s+(?:until|till|through))"
)
_EN_EXPIRY_NOUN = r"(?:expir(?:es|ed|e|y|ing|ation)|goes\s+bad)"
_EN_WHEN = r"(?P<when>(?:the\s+)?day\s+after\s+tomorrow|tomorrow|today|tonight)"
_EN_N = (
    rf"(?P<n>\d+|{ENGLISH_NUMBER_WORD}(?:[\s-]{ENGLISH_NUMBER_WORD})?|an?)"
)
_EN_PERIOD = r"(?P<period>days?|weeks?)"
_EN_MONTH = (
    r"(?P<month>" + "|".join(sorted(MONTHS, key=len, reverse=True)) + r")\.?"
)
_EN_DAY = r"(?P<day>\d{1,2})(?:st|nd|rd|th)?"
_EN_YEAR = r"(?:,?\s+(?P<year>\d{4}))?"

_ZH_N_CHARS = rf"(?:\d+|{CHINESE_NUMERAL})"
_ZH_N = rf"(?P<n>{_ZH_N_CHARS})"
_ZH_WHEN = r"(?P<when>大后天|后天|明天|今天|今晚)"
_ZH_PERIOD = r"(?P<period>个星期|个礼拜|星期|礼拜|天|周)"
_ZH_EXPIRE = r"(?:就|会)?(?:过期|到期)"
_ZH_DATE = (
    rf"(?:(?P<year>\d{{4}})年)?(?P<month>{_ZH_N_CHARS})月(?P<day>{_ZH_N_CHARS})[日号]?"
)
_ZH_SHELF = r"(?:保质期|有效期|过期时间|到期时间)"

_EN_RULES: tuple[tuple[_Rule, ...], ...] = (
    # Relative keywords
    (
        _Rule(re.compile(rf"\b{_EN_VERB}\s+(?:on\s+)?{_EN_WHEN}\b", re.I), _en_relative),
        _Rule(re.compile(rf"\b{_EN_WHEN}\s+(?:it\s+)?{_EN_EXPIRY_NOUN}", re.I), _en_relative),
    ),
    # Absolute month and day
    (
        _Rule(
            re.compile(rf"\b{_EN_VERB}\s+(?:on\s+)?(?:is\s+)?{_EN_MONTH}\s+{_EN_DAY}{_EN_YEAR}\b", re.I),
            _named_month,
        ),
        _Rule(
            re.compile(rf"\b{_EN_MONTH}\s+{_EN_DAY}{_EN_YEAR}\s+{_EN_EXPIRY_NOUN}", re.I),
            _named_month,
        ),
        _Rule(
            re.compile(
                rf"\b{_EN_VERB}\s+(?:on\s+)?(?P<month>\d{{1,2}})/(?P<day>\d{{1,2}})"
                rf"(?:/(?P<year>\d{{2}}|\d{{4}}))?\b",
                re.I,
            ),
            _numeric_month,
        ),
    ),
    # Day or week offsets
    (
        _Rule(re.compile(rf"\b{_EN_VERB}\s+(?:in\s+)?{_EN_N}\s+{_EN_PERIOD}\b", re.I), _en_offset),
        _Rule(
            re.compile(
                rf"\b{_EN_N}\s+{_EN_PERIOD}\s+(?:(?:to|until|before)\s+)?(?:it\s+)?{_EN_EXPIRY_NOUN}",
                re.I,
            ),
            _en_offset,
        ),
        _Rule(re.compile(rf"\bgood\s+for\s+(?:another\s+)?{_EN_N}\s+{_EN_PERIOD}\b", re.I), _en_offset),
        _Rule(re.compile(rf"\b(?:lasts?|keeps?)\s+(?:for\s+)?{_EN_N}\s+{_EN_PERIOD}\b", re.I), _en_offset),
    ),
)

_ZH_RULES: tuple[tuple[_Rule, ...], ...] = (
    (
        _Rule(re.compile(rf"{_ZH_WHEN}\s*{_ZH_EXPIRE}"), _zh_relative),
        _Rule(re.compile(rf"{_ZH_SHELF}(?:到|至)\s*{_ZH_WHEN}"), _zh_relative),
    ),
    (
        _Rule(re.compile(rf"{_ZH_DATE}\s*{_ZH_EXPIRE}"), _numeric_month),
        _Rule(re.compile(rf"{_ZH_SHELF}(?:到|至|是|为)?\s*{_ZH_DATE}"), _numeric_month),
        _Rule(
            re.compile(r"(?P<month>\d{1,2})[/-](?P<day>\d{1,2})\s*" + _ZH_EXPIRE),
            _numeric_month,
        ),
    ),
    (
        _Rule(re.compile(rf"{_ZH_N}\s*{_ZH_PERIOD}\s*(?:后|以后|之后)?\s*{_ZH_EXPIRE}"), _zh_offset),
        _Rule(re.compile(rf"{_ZH_SHELF}(?:是|有|还有|为)?\s*{_ZH_N}\s*{_ZH_PERIOD}"), _zh_offset),
        _Rule(re.compile(rf"(?:还能放|能放|可以放){_ZH_N}\s*{_ZH_PERIOD}"), _zh_offset),
    ),
)

# Wider variants that are removed from the text but never produce a date
_EN_STRIP_ONLY: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b{_EN_VERB}\s+(?:on\s+)?\d{{1,2}}[/-]\d{{1,2}}(?:[/-]\d{{2,4}})?", re.I),
    re.compile(r"\b(?:it\s+)?(?:will\s+)?expir(?:es|ed|e|y|ing|ation)(?:\s+date)?(?:\s+(?:is|on|in))?\b", re.I),
)
_ZH_STRIP_ONLY: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d{1,2}[/-]\d{1,2}\s*(?:过期|到期)"),
    re.compile(rf"\d{{4}}年{_ZH_N_CHARS}月{_ZH_N_CHARS}[日号]?\s*(?:过期|到期)"),
    re.compile(r"(?:就|会)?(?:过期|到期)"),
)

_CLEANUP_PUNCT_RE = re.compile(r"\s*([,.;!?])(?:\s*[,.;!?])+")
_WHITESPACE_RE = re.compile(r"\s+")

_YESTERDAY_RE = re.compile(r"\byesterday\b|昨天|昨日", re.I)
_DAY_BEFORE_YESTERDAY_RE = re.compile(r"\bday\s+before\s+yesterday\b|前天", re.I)


def _rules_for(locale: Locale) -> tuple[tuple[_Rule, ...], ...]:
    return _ZH_RULES if locale is Locale.ZH_HANS else _EN_RULES


def _strip_only_for(locale: Locale) -> tuple[re.Pattern[str], ...]:
    return _ZH_STRIP_ONLY if locale is Locale.ZH_HANS else _EN_STRIP_ONLY


class ExpirationExtractor:
    """Find an explicitly stated expiration date in an utterance."""

    def __init__(self, locale: Locale | str = Locale.EN):
        self.locale = Locale.coerce(locale)
        self._families = _rules_for(self.locale)

    def extract(self, text: str, now: DateLike) -> ExpirationHint | None:
        """
        Extract the first stated expiration date.

        Args:
            text: Corrected (but not expanded) utterance.
            now: The moment the utterance was made; offsets count from its day.

        Returns:
            ExpirationHint with the date and the matched span, or None.
        """
        if not text:
            return None
        today = _today(now)

        for family in self._families:
            hits: list[tuple[int, int, date]] = []
            for rule in family:
                for match in rule.pattern.finditer(text):
                    resolved = rule.resolve(match, today)
                    if resolved is not None:
                        hits.append((match.start(), match.end(), resolved))
                        break
            if hits:
                start, end, resolved = min(hits)
                logger.debug(f"Expiration '{text[start:end]}' resolved to {resolved.isoformat()}")
                return ExpirationHint(date=resolved, start=start, end=end)
        return None


def extract_expiration(text: str, locale: Locale | str, now: DateLike) -> date | None:
    """Convenience wrapper returning only the date."""
    hint = ExpirationExtractor(locale).extract(text, now)
    return hint.date if hint else None


def strip_expiration_phrases(text: str, locale: Locale | str = Locale.EN) -> str:
    """Remove every expiration phrase so dates never leak into item names."""
    if not text:
        return ""
    resolved = Locale.coerce(locale)
    for family in _rules_for(resolved):
        for rule in family:
            text = rule.pattern.sub(" ", text)
    for pattern in _strip_only_for(resolved):
        text = pattern.sub(" ", text)
    text = _CLEANUP_PUNCT_RE.sub(r"\1", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip(" ,.;!?")


def extract_purchase_date(text: str, now: DateLike) -> date:
    """The purchase day: yesterday when the utterance says so, otherwise today."""
    today = _today(now)
    if not text:
        return today
    if _DAY_BEFORE_YESTERDAY_RE.search(text):
        return today - timedelta(days=2)
    if _YESTERDAY_RE.search(text):
        return today - timedelta(days=1)
    return today
