"""Locale-specific correction of speech-recognition errors."""

import re

from pantryparse.normalize.numerals import CHINESE_NUMERAL_CHARS
from pantryparse.schemas import Locale

# =============================================================================
# Simplified Chinese
# =============================================================================

# Words whose substrings collide with correction keys
ZH_PROTECTED_WORDS: tuple[str, ...] = (
    # Time words
    "今天", "昨天", "明天", "今日", "今晚", "今早", "今夜",
    # Containing 金
    "金针菇", "金枪鱼", "金桔", "金银花", "金丝瓜", "金玉米", "金瓜", "金钱菇",
    "金丝枣", "金花菜", "金针", "金橘", "金鱼", "金华火腿",
    # Containing 生
    "生菜", "生姜", "花生", "生抽", "生蚝", "生鱼片", "生肉", "生虾", "生粉",
    "生鱼", "生鸡蛋", "生牛肉", "生猪肉", "生鸭", "生煎包", "生煎",
    # Containing 大
    "大蒜", "大葱", "大白菜", "大米", "大麦", "大豆", "大虾", "大闸蟹", "大枣",
    "大头菜", "大料", "大红枣", "大青菜", "大排", "大肠", "大骨", "大饼",
    # Containing 量 or 凉
    "大量", "少量", "适量", "微量", "定量", "重量", "分量", "容量",
    "凉粉", "凉皮", "凉菜", "凉茶", "凉糕", "凉面", "凉拌菜", "凉拌", "凉瓜",
    # Containing 客
    "客家", "客饭",
    # Dairy
    "酸奶", "牛奶", "羊奶", "椰奶", "杏仁奶", "燕麦奶", "奶酪", "奶油", "黄油",
    "芝士", "炼乳", "豆奶",
    # Correction targets that contain their own key
    "五花肉", "里脊肉",
    # Everyday words
    "近视", "紧张", "良心", "梁子", "声音", "升级", "胜利", "圣诞",
)

ZH_CORRECTIONS: dict[str, str] = {
    # Pounds
    "亮版": "两磅", "亮班": "两磅", "两班": "两磅", "凉班": "两磅",
    "两帮": "两磅", "三帮": "三磅", "四帮": "四磅", "五帮": "五磅",
    # Catty and tael
    "斤亮": "斤两", "斤量": "斤两", "斤良": "斤两", "斤凉": "斤两",
    "金两": "斤两", "近两": "斤两", "今两": "斤两",
    "一金二亮": "一斤二两", "二金三亮": "二斤三两", "三金四亮": "三斤四两",
    "半金半亮": "半斤半两",
    "一金半": "一斤半", "二金半": "二斤半", "三金半": "三斤半",
    # Kilograms
    "工程": "公斤", "公今": "公斤", "公近": "公斤", "工今": "公斤",
    "前克": "千克", "浅克": "千克",
    # Volume
    "豪升": "毫升", "号升": "毫升", "好升": "毫升",
    "嘉伦": "加仑", "佳伦": "加仑", "家伦": "加仑", "贾伦": "加仑",
    # Meat
    "流氓": "牛肉", "流忙": "牛肉", "留忙": "牛肉",
    "猪肉丝": "猪肉", "鸡肉丝": "鸡肉", "鸭肉丝": "鸭肉",
    "里几": "里脊", "里记": "里脊",
    "五花": "五花肉", "午花": "五花肉", "无花": "五花肉",
    "鸡次": "鸡翅", "鸡刺": "鸡翅",
    "吉腿": "鸡腿", "极腿": "鸡腿",
    # Vegetables
    "西红式": "西红柿", "西红市": "西红柿",
    "反茄": "番茄", "范茄": "番茄",
    "胡萝白": "胡萝卜", "湖萝卜": "胡萝卜",
    "百菜": "白菜", "摆菜": "白菜",
    "青叫": "青椒", "清椒": "青椒",
    "黄挂": "黄瓜", "皇瓜": "黄瓜",
    "加子": "茄子", "假子": "茄子",
    "豆脚": "豆角", "逗角": "豆角",
    "秦菜": "芹菜", "琴菜": "芹菜",
    "九菜": "韭菜", "救菜": "韭菜",
    "波菜": "菠菜", "拨菜": "菠菜",
    "声菜": "生菜", "升菜": "生菜",
    "阳葱": "洋葱", "羊葱": "洋葱",
    "图豆": "土豆", "突豆": "土豆",
    "红鼠": "红薯", "虹薯": "红薯",
    "露宿": "芦笋", "路损": "芦笋",
    "雨衣甘蓝": "羽衣甘蓝",
    "西蓝花": "西兰花",
    # Fruit
    "平果": "苹果", "萍果": "苹果",
    "想蕉": "香蕉", "向蕉": "香蕉",
    "成子": "橙子", "承子": "橙子",
    "宁檬": "柠檬", "凝檬": "柠檬",
    "铺萄": "葡萄", "扑萄": "葡萄",
    "草没": "草莓", "草美": "草莓",
    "西挂": "西瓜", "席瓜": "西瓜",
    "弥猴桃": "猕猴桃", "迷猴桃": "猕猴桃",
    "火龙国": "火龙果", "伙龙果": "火龙果",
    "兰梅": "蓝莓",
    "你有过": "牛油果",
    # Dairy and eggs
    "留奶": "牛奶", "牛来": "牛奶",
    "酸来": "酸奶", "算奶": "酸奶",
    "来酪": "奶酪", "奶老": "奶酪",
    "吉蛋": "鸡蛋", "机蛋": "鸡蛋",
    # Staples
    "打米": "大米", "大迷": "大米",
    "面跳": "面条", "面调": "面条",
    "面抱": "面包", "面报": "面包",
    "蛮头": "馒头", "满头": "馒头",
    "包紫": "包子", "宝子": "包子",
    "交子": "饺子", "叫子": "饺子",
    # Condiments
    "声抽": "生抽", "升抽": "生抽",
    "劳抽": "老抽", "捞抽": "老抽",
    "想油": "香油", "向油": "香油",
    "湖椒": "胡椒", "狐椒": "胡椒",
    "把角": "八角", "巴角": "八角",
    "你爹想": "迷迭香",
    # Seafood
    "三纹鱼": "三文鱼", "山文鱼": "三文鱼",
    "金抢鱼": "金枪鱼",
    "戴鱼": "带鱼", "待鱼": "带鱼",
    "游鱼": "鱿鱼", "尤鱼": "鱿鱼",
    "闪贝": "扇贝", "善贝": "扇贝",
    "声蚝": "生蚝", "升蚝": "生蚝",
    # Drinks
    "渴乐": "可乐", "克乐": "可乐",
    "雪璧": "雪碧", "学碧": "雪碧",
    "过汁": "果汁", "国汁": "果汁",
    "卡啡": "咖啡", "卡非": "咖啡",
}

# Single-character unit homophones, only rewritten right after a numeral
ZH_UNIT_HOMOPHONES: dict[str, str] = {
    "近": "斤", "紧": "斤", "金": "斤",
    "良": "两", "梁": "两", "凉": "两", "亮": "两",
    "棒": "磅", "帮": "磅",
    "沓": "打", "踏": "打", "塌": "打", "搭": "打",
    "生": "升", "胜": "升", "圣": "升", "声": "升",
    "客": "克", "格": "克",
}

_ZH_NUMERAL_CLASS = rf"[0-9{CHINESE_NUMERAL_CHARS}半]"

_ZH_UNIT_HOMOPHONE_RE = re.compile(
    rf"(?<={_ZH_NUMERAL_CLASS})([{''.join(ZH_UNIT_HOMOPHONES)}])"
)

# A bare 奶 right after a container; complete dairy names are never split
_ZH_CONTAINER_MILK_RE = re.compile(r"(罐|瓶|盒|袋)奶(?![粉酪油昔茶片糖酒])")
_ZH_CONTAINER_MILK_TARGET = {"罐": "酸奶", "瓶": "牛奶", "盒": "牛奶", "袋": "牛奶"}

_ZH_STANDALONE_MILK_RE = re.compile(r"(?<![\u4e00-\u9fff])奶(?![\u4e00-\u9fff])")

# =============================================================================
# English
# =============================================================================

ENGLISH_CORRECTIONS: dict[str, str] = {
    "brock li": "broccoli",
    "brocoli": "broccoli",
    "yoghurt": "yogurt",
    "yogourt": "yogurt",
    "zucchinis": "zucchini",
}

_EN_HOMOPHONE_UNITS = (
    r"(?:pounds?|lbs?|kilos?|kilograms?|grams?|ounces?|liters?|litres?|gallons?|"
    r"cups?|bottles?|cans?|boxes|bags?|cartons?|jars?|packs?|dozens?|pieces?)\b"
)

ENGLISH_REGEX_CORRECTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(rf"\b(?:to|too)\s+(?={_EN_HOMOPHONE_UNITS})"), "two "),
    (re.compile(rf"\bfor\s+(?={_EN_HOMOPHONE_UNITS})"), "four "),
    (re.compile(r"\bwon\b"), "one"),
    (re.compile(r"\b(?:litter|leader)(s?)\b"), r"liter\1"),
    (re.compile(r"\bkilo grams?\b"), "kilograms"),
    (re.compile(r"\bmil+ili(?:ters?|tres?)\b"), "ml"),
)

# =============================================================================
# Shared
# =============================================================================

FULL_WIDTH_PUNCTUATION: dict[str, str] = {
    "，": ",",
    "。": ".",
    "、": ",",
    "！": "!",
    "？": "?",
    "：": ":",
    "；": ";",
    "（": "(",
    "）": ")",
    "　": " ",
}

_PLACEHOLDER = "\ue000{}\ue001"
_WHITESPACE_RE = re.compile(r"\s+")


def pre_clean(text: str | None) -> str:
    """Trim and map full-width punctuation to ASCII."""
    if not text:
        return ""
    cleaned = text.translate(str.maketrans(FULL_WIDTH_PUNCTUATION))
    return _collapse_whitespace(cleaned)


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _protect(text: str, words: tuple[str, ...]) -> tuple[str, dict[str, str]]:
    """Swap protected words for placeholders, longest first."""
    restore: dict[str, str] = {}
    for index, word in enumerate(sorted(words, key=len, reverse=True)):
        if word in text:
            placeholder = _PLACEHOLDER.format(index)
            restore[placeholder] = word
            text = text.replace(word, placeholder)
    return text, restore


def _restore(text: str, restore: dict[str, str]) -> str:
    for placeholder, word in restore.items():
        text = text.replace(placeholder, word)
    return text


def _apply_literal(text: str, corrections: dict[str, str]) -> str:
    for wrong in sorted(corrections, key=len, reverse=True):
        if wrong in text:
            text = text.replace(wrong, corrections[wrong])
    return text


def _fix_unit_homophones(text: str) -> str:
    # A fixed unit (两) can itself be the numeral in front of the next homophone
    while True:
        fixed = _ZH_UNIT_HOMOPHONE_RE.sub(lambda m: ZH_UNIT_HOMOPHONES[m.group(1)], text)
        if fixed == text:
            return fixed
        text = fixed


def _container_milk(match: re.Match[str]) -> str:
    container = match.group(1)
    return container + _ZH_CONTAINER_MILK_TARGET[container]


def _apply_chinese_corrections(text: str) -> str:
    text, restore = _protect(text, ZH_PROTECTED_WORDS)
    text = _apply_literal(text, ZH_CORRECTIONS)
    # Literal fixes can produce protected words (声菜 -> 生菜)
    text, produced = _protect(text, ZH_PROTECTED_WORDS)
    restore.update(produced)
    text = _fix_unit_homophones(text)
    text = _collapse_whitespace(text)
    text = _ZH_CONTAINER_MILK_RE.sub(_container_milk, text)
    text = _ZH_STANDALONE_MILK_RE.sub("牛奶", text)
    return _restore(text, restore)


def _apply_english_corrections(text: str) -> str:
    text = _collapse_whitespace(text.lower())
    text = _apply_literal(text, ENGLISH_CORRECTIONS)
    for pattern, replacement in ENGLISH_REGEX_CORRECTIONS:
        text = pattern.sub(replacement, text)
    return _collapse_whitespace(text)


def apply_corrections(text: str | None, locale: Locale | str = Locale.EN) -> str:
    """
    Correct systematic speech-recognition errors for a locale.

    Protected words are swapped out before any rewrite and restored last, so
    food and time words that contain a correction key survive untouched.
    Applying the corrections twice gives the same result as applying them once.

    Args:
        text: Raw or pre-cleaned utterance.
        locale: Utterance locale.

    Returns:
        Corrected text with collapsed whitespace.
    """
    cleaned = pre_clean(text)
    if not cleaned:
        return ""
    if Locale.coerce(locale) is Locale.ZH_HANS:
        return _apply_chinese_corrections(cleaned)
    return _apply_english_corrections(cleaned)
