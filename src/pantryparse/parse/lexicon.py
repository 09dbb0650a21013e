"""Bilingual food lexicon, liquid detection and canonical names."""

import re
from functools import lru_cache
from typing import cast

import inflect
from inflect import Word
from rapidfuzz import fuzz

from pantryparse.logging_config import get_logger

logger = get_logger(__name__)

_INFLECT_ENGINE = inflect.engine()
_COLLAPSE_SPACES = re.compile(r"\s+")
_HAN_RE = re.compile(r"[\u4e00-\u9fff]")
_TRIM_CHARS = " \t,.;:!?'\"()-"

# Canonical English name -> spoken aliases (Chinese included)
FOOD_LEXICON: dict[str, tuple[str, ...]] = {
    # Fruit
    "apple": ("apples", "苹果"),
    "banana": ("bananas", "香蕉"),
    "orange": ("oranges", "橙子", "橙"),
    "mandarin": ("mandarins", "tangerine", "tangerines", "橘子", "桔子"),
    "lemon": ("lemons", "柠檬"),
    "lime": ("limes", "青柠"),
    "grape": ("grapes", "葡萄", "提子"),
    "strawberry": ("strawberries", "草莓"),
    "blueberry": ("blueberries", "蓝莓"),
    "cherry": ("cherries", "樱桃", "车厘子"),
    "watermelon": ("watermelons", "西瓜"),
    "pear": ("pears", "梨", "梨子"),
    "peach": ("peaches", "桃子", "桃"),
    "plum": ("plums", "李子"),
    "mango": ("mangoes", "mangos", "芒果"),
    "pineapple": ("pineapples", "菠萝", "凤梨"),
    "kiwi": ("kiwis", "kiwifruit", "猕猴桃", "奇异果"),
    "avocado": ("avocados", "牛油果"),
    "grapefruit": ("grapefruits", "柚子"),
    "pomegranate": ("pomegranates", "石榴"),
    "lychee": ("lychees", "荔枝"),
    "dragon fruit": ("dragon fruits", "火龙果"),
    "cantaloupe": ("cantaloupes", "哈密瓜"),
    "coconut": ("coconuts", "椰子"),
    "durian": ("durians", "榴莲"),
    # Vegetables
    "tomato": ("tomatoes", "西红柿", "番茄"),
    "potato": ("potatoes", "土豆", "马铃薯"),
    "sweet potato": ("sweet potatoes", "红薯", "地瓜"),
    "carrot": ("carrots", "胡萝卜"),
    "radish": ("radishes", "萝卜", "白萝卜"),
    "onion": ("onions", "洋葱"),
    "scallion": ("scallions", "green onion", "green onions", "大葱", "香葱", "葱"),
    "garlic": ("大蒜", "蒜"),
    "ginger": ("生姜", "姜"),
    "cabbage": ("cabbages", "白菜", "大白菜", "卷心菜", "包菜"),
    "spinach": ("菠菜",),
    "lettuce": ("lettuces", "生菜"),
    "celery": ("芹菜",),
    "chives": ("chive", "韭菜"),
    "bok choy": ("油菜", "小白菜", "青菜"),
    "broccoli": ("西兰花",),
    "cauliflower": ("花菜", "菜花"),
    "cucumber": ("cucumbers", "黄瓜"),
    "eggplant": ("eggplants", "茄子"),
    "bell pepper": ("bell peppers", "青椒", "甜椒", "彩椒"),
    "chili pepper": ("chili peppers", "chili", "chilies", "辣椒"),
    "green bean": ("green beans", "豆角", "四季豆"),
    "mushroom": ("mushrooms", "蘑菇"),
    "shiitake": ("shiitakes", "香菇"),
    "enoki": ("金针菇",),
    "corn": ("玉米",),
    "pumpkin": ("pumpkins", "南瓜"),
    "zucchini": ("西葫芦",),
    "asparagus": ("芦笋",),
    "kale": ("羽衣甘蓝",),
    "bean sprouts": ("bean sprout", "豆芽"),
    "tofu": ("豆腐",),
    # Meat
    "beef": ("牛肉", "牛排", "steak", "steaks"),
    "pork": ("猪肉", "五花肉", "里脊", "pork belly"),
    "chicken": ("鸡肉", "鸡"),
    "chicken wing": ("chicken wings", "鸡翅"),
    "chicken leg": ("chicken legs", "drumstick", "drumsticks", "鸡腿"),
    "chicken breast": ("chicken breasts", "鸡胸肉"),
    "duck": ("鸭肉", "鸭"),
    "lamb": ("mutton", "羊肉"),
    "turkey": ("火鸡",),
    "sausage": ("sausages", "香肠"),
    "ham": ("hams", "火腿"),
    "bacon": ("培根",),
    "ground meat": ("minced meat", "肉馅", "绞肉"),
    # Seafood
    "fish": ("鱼",),
    "salmon": ("三文鱼",),
    "tuna": ("金枪鱼",),
    "cod": ("鳕鱼",),
    "bass": ("sea bass", "鲈鱼"),
    "carp": ("鲤鱼", "草鱼", "鲫鱼"),
    "hairtail": ("带鱼",),
    "shrimp": ("shrimps", "prawn", "prawns", "虾", "大虾"),
    "crab": ("crabs", "蟹", "螃蟹", "大闸蟹"),
    "lobster": ("lobsters", "龙虾"),
    "scallop": ("scallops", "扇贝"),
    "oyster": ("oysters", "生蚝"),
    "squid": ("鱿鱼",),
    "clam": ("clams", "蛤蜊"),
    # Dairy and eggs
    "milk": ("牛奶", "鲜奶", "纯奶"),
    "yogurt": ("yogurts", "酸奶"),
    "cheese": ("cheeses", "奶酪", "芝士"),
    "butter": ("黄油",),
    "cream": ("奶油", "heavy cream", "whipping cream"),
    "soy milk": ("豆奶", "豆浆"),
    "almond milk": ("杏仁奶",),
    "oat milk": ("燕麦奶",),
    "coconut milk": ("椰奶",),
    "goat milk": ("羊奶",),
    "egg": ("eggs", "鸡蛋", "蛋"),
    "duck egg": ("duck eggs", "鸭蛋"),
    "quail egg": ("quail eggs", "鹌鹑蛋"),
    # Grains and staples
    "rice": ("大米", "米"),
    "flour": ("面粉",),
    "bread": ("breads", "面包", "loaf of bread"),
    "noodles": ("noodle", "面条", "挂面"),
    "pasta": ("spaghetti", "意面", "意大利面"),
    "oats": ("oatmeal", "燕麦"),
    "dumpling": ("dumplings", "饺子"),
    "steamed bun": ("steamed buns", "bun", "buns", "包子"),
    "mantou": ("馒头",),
    "cereal": ("cereals", "麦片"),
    # Condiments
    "salt": ("盐",),
    "sugar": ("糖", "白糖"),
    "honey": ("蜂蜜",),
    "vinegar": ("醋",),
    "soy sauce": ("酱油", "生抽", "老抽"),
    "oyster sauce": ("蚝油",),
    "ketchup": ("番茄酱",),
    "mayonnaise": ("mayo", "蛋黄酱"),
    "thousand island": ("千岛酱",),
    "olive oil": ("橄榄油",),
    "sesame oil": ("香油", "芝麻油"),
    "vegetable oil": ("cooking oil", "植物油", "食用油"),
    "black pepper": ("pepper", "胡椒", "胡椒粉"),
    "star anise": ("八角",),
    "rosemary": ("迷迭香",),
    # Beverages
    "water": ("mineral water", "矿泉水", "水"),
    "juice": ("果汁",),
    "orange juice": ("橙汁",),
    "apple juice": ("苹果汁",),
    "cola": ("coke", "可乐"),
    "sprite": ("雪碧",),
    "soda": ("sodas", "汽水"),
    "coffee": ("咖啡",),
    "tea": ("茶", "茶叶"),
    "beer": ("beers", "啤酒"),
    "wine": ("wines", "红酒", "葡萄酒"),
    # Snacks
    "chocolate": ("chocolates", "巧克力"),
    "cookie": ("cookies", "biscuit", "biscuits", "饼干"),
    "chips": ("potato chips", "crisps", "薯片"),
    "peanut": ("peanuts", "花生"),
    "walnut": ("walnuts", "核桃"),
    "ice cream": ("冰淇淋", "雪糕"),
    "spam": ("午餐肉",),
    "cake": ("cakes", "蛋糕"),
    # Generic
    "fruit": ("fruits", "水果"),
    "vegetable": ("vegetables", "veggies", "蔬菜"),
    "meat": ("肉",),
}

# Liquids that a container can hold without a stated volume
LIQUID_LEXICON: tuple[str, ...] = (
    # Dairy
    "牛奶", "酸奶", "豆奶", "椰奶", "杏仁奶", "燕麦奶", "羊奶", "奶昔", "鲜奶", "纯奶",
    "奶油", "炼乳",
    "milk", "yogurt", "kefir", "cream", "buttermilk", "half and half",
    # Juice and soft drinks
    "果汁", "橙汁", "苹果汁", "葡萄汁", "汽水", "可乐", "雪碧", "苏打水", "气泡水", "饮料",
    "juice", "soda", "cola", "coke", "sprite", "ginger ale", "tonic water", "sports drink",
    # Tea and coffee
    "茶", "奶茶", "咖啡", "拿铁",
    "tea", "iced tea", "coffee", "espresso", "latte", "cappuccino",
    # Alcohol
    "酒", "啤酒", "红酒", "白酒", "黄酒", "米酒", "料酒", "香槟",
    "wine", "beer", "whiskey", "vodka", "rum", "gin", "brandy", "champagne",
    # Water
    "水", "矿泉水", "纯净水", "柠檬水",
    "water", "mineral water", "sparkling water",
    # Sauces and oils
    "醋", "油", "香油", "芝麻油", "橄榄油", "酱油", "生抽", "老抽", "蚝油", "鱼露", "蜂蜜",
    "vinegar", "oil", "soy sauce", "fish sauce", "oyster sauce", "honey", "syrup",
    "ketchup", "sauce",
    # Other
    "豆浆", "椰汁", "汤",
    "broth", "stock", "soup", "smoothie", "shake", "drink", "beverage",
)


def normalize_name(name: str | None) -> str:
    """Lowercase, trim punctuation and collapse inner whitespace."""
    if not name:
        return ""
    cleaned = _COLLAPSE_SPACES.sub(" ", name.lower()).strip(_TRIM_CHARS)
    return cleaned.strip()


def singularize(name: str) -> str:
    """Singularize the head (last) word of an English name."""
    if not name or _HAN_RE.search(name):
        return name
    parts = name.split(" ")
    last_word = cast(Word, parts[-1])
    parts[-1] = str(_INFLECT_ENGINE.singular_noun(last_word) or last_word)
    return " ".join(parts)


@lru_cache
def alias_index() -> dict[str, str]:
    """Map every spoken alias (and canonical name) to its canonical name."""
    index: dict[str, str] = {}
    for canonical, aliases in FOOD_LEXICON.items():
        index[canonical] = canonical
        for alias in aliases:
            index.setdefault(alias.lower(), canonical)
    return index


@lru_cache
def han_vocabulary() -> frozenset[str]:
    """Chinese food words, used by the tokenizer for segmentation."""
    return frozenset(alias for alias in alias_index() if _HAN_RE.search(alias))


def _is_ascii_term(term: str) -> bool:
    return not _HAN_RE.search(term)


def _contains_term(text: str, term: str) -> bool:
    """Substring test; English terms must also sit on word boundaries."""
    if term not in text:
        return False
    if not _is_ascii_term(term):
        return True
    return re.search(rf"\b{re.escape(term)}\b", text) is not None


def matches_keyword(name: str, keyword: str) -> bool:
    """
    Keyword test used by the table-backed collaborators.

    English keywords match whole words (plural allowed), single Chinese
    characters must end the name, longer Chinese keywords match anywhere.
    """
    if _is_ascii_term(keyword):
        return re.search(rf"\b{re.escape(keyword)}(?:s|es)?\b", name) is not None
    if len(keyword) == 1:
        return name.endswith(keyword)
    return keyword in name


@lru_cache
def _liquid_pattern() -> re.Pattern[str]:
    ascii_terms = sorted((t for t in LIQUID_LEXICON if _is_ascii_term(t)), key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(t) for t in ascii_terms) + r")s?\b")


def is_known_food(name: str | None) -> bool:
    """Exact lexicon hit, tolerating English plurals."""
    normalized = normalize_name(name)
    if not normalized:
        return False
    index = alias_index()
    return normalized in index or singularize(normalized) in index


def is_food_name(name: str | None) -> bool:
    """
    Check whether a name plausibly refers to a food.

    A name qualifies on an exact lexicon hit or when it contains, or is
    contained in, any lexicon entry.
    """
    normalized = normalize_name(name)
    if not normalized:
        return False
    if is_known_food(normalized):
        return True
    return any(alias in normalized or normalized in alias for alias in alias_index())


def is_liquid(name: str | None) -> bool:
    """
    Check whether a food is a liquid.

    English terms match on word boundaries. Chinese terms match as substrings,
    except single characters (水, 油, 茶...) which must end the name so that
    水果 is not a liquid.
    """
    normalized = normalize_name(name)
    if not normalized:
        return False
    if _liquid_pattern().search(normalized):
        return True
    for term in LIQUID_LEXICON:
        if _is_ascii_term(term):
            continue
        if len(term) == 1:
            if normalized.endswith(term):
                return True
        elif term in normalized:
            return True
    return False


def canonical_name(name: str | None) -> str:
    """
    Resolve a spoken food name to its canonical English name.

    Resolution order:
    1. Exact alias hit
    2. Singularized alias hit ("tomatoes" -> "tomato")
    3. Best alias contained in the name, scored with rapidfuzz
    4. The cleaned, singularized name itself
    """
    normalized = normalize_name(name)
    if not normalized:
        return ""

    index = alias_index()
    if normalized in index:
        return index[normalized]

    singular = singularize(normalized)
    if singular in index:
        return index[singular]

    candidates = {
        alias for alias in index if _contains_term(normalized, alias) or _contains_term(singular, alias)
    }
    if candidates:
        best = max(
            candidates,
            key=lambda alias: (fuzz.ratio(alias, singular), len(alias)),
        )
        logger.debug(f"Canonical name for '{normalized}' resolved via alias '{best}'")
        return index[best]

    return singular
