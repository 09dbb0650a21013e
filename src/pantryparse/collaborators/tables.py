"""Table-backed default collaborators."""

from pantryparse.collaborators.base import (
    Classification,
    FoodClassifier,
    ShelfLifeTable,
    StorageAdvisor,
)
from pantryparse.logging_config import get_logger
from pantryparse.parse.lexicon import matches_keyword, normalize_name
from pantryparse.schemas import FoodCategory, StorageLocation

logger = get_logger(__name__)

CATEGORY_EMOJI: dict[FoodCategory, str] = {
    FoodCategory.DAIRY: "🥛",
    FoodCategory.EGGS: "🥚",
    FoodCategory.MEAT: "🥩",
    FoodCategory.SEAFOOD: "🐟",
    FoodCategory.VEGETABLES: "🥬",
    FoodCategory.FRUITS: "🍎",
    FoodCategory.GRAINS: "🌾",
    FoodCategory.BEVERAGES: "🥤",
    FoodCategory.CONDIMENTS: "🧂",
    FoodCategory.FROZEN: "🧊",
    FoodCategory.CANNED: "🥫",
    FoodCategory.SNACKS: "🍿",
    FoodCategory.OTHER: "📦",
}

# Checked in order: compound foods ("ice cream", "orange juice", "fish sauce")
# must hit their own category before the ingredient they are named after.
CATEGORY_KEYWORDS: dict[FoodCategory, tuple[str, ...]] = {
    FoodCategory.FROZEN: (
        "frozen", "ice cream", "popsicle", "dumpling", "wonton", "spring roll",
        "冰淇淋", "雪糕", "冰棒", "汤圆", "饺子", "馄饨", "春卷", "速冻",
    ),
    FoodCategory.CANNED: ("canned", "spam", "罐头", "午餐肉"),
    FoodCategory.BEVERAGES: (
        "juice", "soda", "cola", "coke", "water", "tea", "coffee", "beer", "wine",
        "drink", "beverage", "lemonade",
        "果汁", "橙汁", "汽水", "可乐", "雪碧", "矿泉水", "纯净水", "饮料", "茶", "咖啡",
        "啤酒", "红酒", "豆浆",
    ),
    FoodCategory.CONDIMENTS: (
        "sauce", "salt", "sugar", "oil", "vinegar", "pepper", "ketchup", "mayonnaise",
        "mustard", "honey", "spice", "seasoning", "cinnamon", "cumin",
        "盐", "糖", "醋", "酱油", "生抽", "老抽", "油", "胡椒", "调料", "酱", "蜂蜜", "花椒",
        "八角", "料酒",
    ),
    FoodCategory.SNACKS: (
        "cookie", "chips", "candy", "chocolate", "nuts", "popcorn", "biscuit", "cake",
        "cracker",
        "饼干", "薯片", "糖果", "巧克力", "坚果", "爆米花", "瓜子", "蛋糕", "零食",
    ),
    FoodCategory.EGGS: ("egg", "蛋", "鸡蛋", "鸭蛋", "鹌鹑蛋"),
    FoodCategory.DAIRY: (
        "milk", "yogurt", "cheese", "butter", "cream", "kefir",
        "奶", "牛奶", "酸奶", "奶酪", "芝士", "黄油", "奶油",
    ),
    FoodCategory.SEAFOOD: (
        "fish", "shrimp", "crab", "seafood", "salmon", "tuna", "cod", "prawn",
        "lobster", "oyster", "scallop", "squid", "clam",
        "鱼", "虾", "蟹", "贝", "海鲜", "三文鱼", "鱿鱼", "生蚝", "扇贝",
    ),
    FoodCategory.MEAT: (
        "meat", "pork", "beef", "chicken", "lamb", "steak", "bacon", "ham",
        "sausage", "turkey", "duck",
        "肉", "猪肉", "牛肉", "鸡肉", "羊肉", "牛排", "培根", "火腿", "香肠", "鸡腿", "鸡翅",
    ),
    FoodCategory.GRAINS: (
        "rice", "bread", "noodle", "pasta", "flour", "oats", "cereal", "quinoa",
        "米", "大米", "面", "面包", "面条", "面粉", "燕麦", "馒头", "包子",
    ),
    FoodCategory.VEGETABLES: (
        "vegetable", "tomato", "potato", "onion", "garlic", "carrot", "cabbage",
        "lettuce", "spinach", "broccoli", "cucumber", "celery", "mushroom",
        "eggplant", "zucchini", "corn", "bean", "pea", "ginger",
        "蔬菜", "菜", "白菜", "萝卜", "土豆", "番茄", "西红柿", "黄瓜", "洋葱", "蒜", "生姜",
        "韭菜", "菠菜", "芹菜", "西兰花", "蘑菇", "茄子", "豆腐",
    ),
    FoodCategory.FRUITS: (
        "fruit", "apple", "banana", "orange", "lemon", "strawberry", "grape",
        "watermelon", "pear", "peach", "mango", "cherry", "blueberry", "kiwi",
        "pineapple", "avocado", "plum", "mandarin", "lime",
        "水果", "果", "苹果", "香蕉", "橙子", "柠檬", "草莓", "葡萄", "西瓜", "梨", "桃",
        "芒果", "樱桃", "蓝莓", "猕猴桃", "菠萝", "牛油果",
    ),
}

FREEZER_FOODS: tuple[str, ...] = (
    # Meat
    "牛肉", "猪肉", "羊肉", "牛排", "猪排", "羊排", "里脊", "肋排", "牛腩",
    "beef", "pork", "lamb", "venison", "steak", "ribs", "tenderloin", "brisket",
    # Poultry
    "鸡肉", "鸭肉", "鹅肉", "火鸡", "鸡腿", "鸡翅", "鸡胸肉",
    "chicken", "duck", "goose", "turkey", "drumstick",
    # Processed meat
    "肉丸", "香肠", "培根", "火腿", "腊肉", "肉馅", "绞肉",
    "meatball", "sausage", "bacon", "ham", "ground meat", "minced meat",
    # Fish
    "三文鱼", "金枪鱼", "鳕鱼", "鲈鱼", "带鱼", "黄鱼", "鲤鱼", "草鱼", "鲫鱼",
    "salmon", "tuna", "cod", "bass", "carp", "eel", "halibut", "mackerel",
    # Shellfish
    "虾", "蟹", "扇贝", "蛤蜊", "生蚝", "鱿鱼", "章鱼", "龙虾",
    "shrimp", "crab", "scallop", "clam", "oyster", "squid", "octopus", "lobster", "prawn",
    # Frozen food
    "冰淇淋", "雪糕", "汤圆", "饺子", "馄饨", "春卷", "冰棒",
    "ice cream", "popsicle", "dumpling", "wonton", "spring roll", "frozen",
)

REFRIGERATOR_FOODS: tuple[str, ...] = (
    # Dairy
    "牛奶", "酸奶", "奶酪", "黄油", "奶油", "芝士", "羊奶", "椰奶", "杏仁奶", "豆奶",
    "milk", "yogurt", "cheese", "butter", "cream", "mozzarella", "cheddar", "buttermilk",
    # Eggs
    "鸡蛋", "鸭蛋", "鹅蛋", "鹌鹑蛋", "咸鸭蛋", "松花蛋",
    "egg",
    # Leafy greens
    "白菜", "菠菜", "韭菜", "芹菜", "生菜", "油菜", "小白菜", "香菜", "香葱",
    "cabbage", "spinach", "leek", "celery", "lettuce", "bok choy", "cilantro", "scallion",
    # Roots
    "胡萝卜", "萝卜", "山药", "莲藕", "竹笋", "生姜",
    "carrot", "radish", "yam", "lotus root", "bamboo shoot", "ginger",
    # Gourds and peppers
    "茄子", "豆角", "黄瓜", "西红柿", "青椒", "辣椒", "花菜", "西兰花", "冬瓜", "苦瓜",
    "eggplant", "green bean", "cucumber", "bell pepper", "cauliflower", "broccoli", "zucchini",
    # Mushrooms
    "蘑菇", "香菇", "金针菇", "杏鲍菇", "木耳",
    "mushroom", "shiitake", "enoki",
    # Chilled fruit
    "草莓", "蓝莓", "黑莓", "覆盆子", "樱桃", "葡萄", "提子", "哈密瓜", "荔枝", "火龙果",
    "strawberry", "blueberry", "blackberry", "raspberry", "cherry", "grape", "cantaloupe",
    "lychee", "dragon fruit",
    # Soy products
    "豆腐", "豆干", "豆皮", "豆芽",
    "tofu", "bean sprout",
    # Chilled sauces
    "辣椒酱", "沙拉酱", "蛋黄酱", "番茄酱", "千岛酱", "蚝油", "鱼露", "味噌",
    "mayonnaise", "ketchup", "mustard", "oyster sauce", "fish sauce", "miso",
)

PANTRY_FOODS: tuple[str, ...] = (
    # Grains
    "大米", "小米", "糯米", "面粉", "燕麦", "藜麦",
    "rice", "flour", "oats", "quinoa", "barley",
    # Noodles
    "面条", "挂面", "意大利面", "通心粉", "米粉", "粉丝",
    "noodle", "pasta", "macaroni", "ramen", "udon", "vermicelli",
    # Dried beans and nuts
    "绿豆", "红豆", "黑豆", "黄豆", "花生", "核桃", "杏仁", "腰果", "开心果", "栗子",
    "lentil", "chickpea", "peanut", "walnut", "almond", "cashew", "pistachio", "chestnut",
    # Canned
    "午餐肉", "罐头",
    "spam", "canned",
    # Seasonings
    "盐", "糖", "冰糖", "红糖", "蜂蜜", "胡椒粉", "花椒", "孜然", "八角", "桂皮",
    "salt", "sugar", "honey", "maple syrup", "black pepper", "cumin", "star anise", "cinnamon",
    "生抽", "老抽", "醋", "料酒", "香油", "芝麻油", "橄榄油", "花生油",
    "soy sauce", "vinegar", "sesame oil", "olive oil", "vegetable oil",
    # Room-temperature fruit
    "苹果", "梨", "橘子", "橙子", "柠檬", "柚子", "西瓜", "芒果", "猕猴桃", "桃子", "牛油果",
    "番茄", "香蕉", "土豆", "洋葱", "大蒜",
    "apple", "pear", "orange", "mandarin", "lemon", "grapefruit", "lime", "watermelon",
    "mango", "kiwi", "peach", "avocado", "tomato", "banana", "potato", "onion", "garlic",
    # Snacks
    "饼干", "薯片", "爆米花", "瓜子", "巧克力", "糖果",
    "biscuit", "cookie", "chips", "popcorn", "chocolate", "candy",
    # Tea and coffee
    "茶叶", "咖啡豆", "咖啡粉",
    "coffee beans", "instant coffee", "cocoa powder",
)

CATEGORY_STORAGE: dict[FoodCategory, StorageLocation] = {
    FoodCategory.MEAT: StorageLocation.FREEZER,
    FoodCategory.SEAFOOD: StorageLocation.FREEZER,
    FoodCategory.FROZEN: StorageLocation.FREEZER,
    FoodCategory.DAIRY: StorageLocation.REFRIGERATOR,
    FoodCategory.EGGS: StorageLocation.REFRIGERATOR,
    FoodCategory.VEGETABLES: StorageLocation.REFRIGERATOR,
    FoodCategory.FRUITS: StorageLocation.REFRIGERATOR,
    FoodCategory.BEVERAGES: StorageLocation.REFRIGERATOR,
}

# (freezer, refrigerator, pantry) days
ShelfLife = tuple[int, int, int]

FOOD_SHELF_LIFE: dict[str, ShelfLife] = {
    # Meat
    "beef": (315, 4, 1), "牛肉": (315, 4, 1),
    "pork": (270, 4, 1), "猪肉": (270, 4, 1),
    "lamb": (315, 4, 1), "羊肉": (315, 4, 1),
    "steak": (315, 4, 1), "牛排": (315, 4, 1),
    "chicken": (365, 2, 1), "鸡肉": (365, 2, 1),
    "duck": (180, 2, 1), "鸭肉": (180, 2, 1),
    "turkey": (365, 2, 1),
    "sausage": (45, 7, 1), "香肠": (45, 7, 1),
    "bacon": (30, 7, 1), "培根": (30, 7, 1),
    "ham": (45, 21, 7), "火腿": (45, 21, 7),
    # Seafood
    "salmon": (75, 2, 1), "三文鱼": (75, 2, 1),
    "tuna": (210, 2, 1), "cod": (210, 2, 1),
    "fish": (180, 2, 1), "鱼": (180, 2, 1),
    "shrimp": (150, 2, 1), "虾": (150, 2, 1),
    "crab": (90, 2, 1), "蟹": (90, 2, 1),
    "oyster": (75, 2, 1), "squid": (90, 2, 1),
    # Dairy
    "milk": (90, 6, 0), "牛奶": (90, 6, 0),
    "yogurt": (45, 10, 0), "酸奶": (45, 10, 0),
    "cheese": (180, 25, 0), "奶酪": (180, 25, 0),
    "butter": (225, 60, 1), "黄油": (225, 60, 1),
    "cream": (180, 21, 0), "奶油": (180, 21, 0),
    # Eggs
    "egg": (0, 28, 7), "鸡蛋": (0, 28, 7),
    # Vegetables
    "cabbage": (180, 7, 2), "白菜": (180, 7, 2),
    "spinach": (180, 5, 1), "菠菜": (180, 5, 1),
    "lettuce": (180, 5, 1), "生菜": (180, 5, 1),
    "celery": (180, 7, 2), "芹菜": (180, 7, 2),
    "carrot": (365, 21, 7), "胡萝卜": (365, 21, 7),
    "potato": (365, 30, 60), "土豆": (365, 30, 60),
    "onion": (365, 30, 90), "洋葱": (365, 30, 90),
    "garlic": (365, 30, 180), "大蒜": (365, 30, 180),
    "ginger": (365, 21, 14), "生姜": (365, 21, 14),
    "cucumber": (365, 7, 3), "黄瓜": (365, 7, 3),
    "broccoli": (365, 7, 2), "西兰花": (365, 7, 2),
    "mushroom": (0, 7, 0), "蘑菇": (0, 7, 0),
    "tomato": (365, 7, 5), "番茄": (365, 7, 5),
    # Fruit
    "strawberry": (300, 3, 1), "草莓": (300, 3, 1),
    "blueberry": (300, 5, 1), "蓝莓": (300, 5, 1),
    "cherry": (300, 4, 1), "樱桃": (300, 4, 1),
    "grape": (300, 7, 2), "葡萄": (300, 7, 2),
    "apple": (365, 30, 14), "苹果": (365, 30, 14),
    "pear": (365, 21, 7), "梨": (365, 21, 7),
    "peach": (365, 7, 5), "plum": (365, 7, 5),
    "orange": (365, 21, 14), "橙子": (365, 21, 14),
    "mandarin": (365, 14, 10), "lemon": (365, 30, 21),
    "mango": (365, 7, 7), "watermelon": (365, 7, 7),
    "kiwi": (365, 14, 7), "avocado": (365, 5, 5),
    "banana": (365, 7, 7), "香蕉": (365, 7, 7),
}

CATEGORY_SHELF_LIFE: dict[FoodCategory, ShelfLife] = {
    FoodCategory.MEAT: (270, 3, 1),
    FoodCategory.SEAFOOD: (150, 2, 1),
    FoodCategory.DAIRY: (120, 7, 0),
    FoodCategory.EGGS: (0, 28, 7),
    FoodCategory.VEGETABLES: (0, 5, 2),
    FoodCategory.FRUITS: (240, 7, 3),
    FoodCategory.GRAINS: (0, 0, 365),
    FoodCategory.BEVERAGES: (90, 7, 14),
    FoodCategory.CONDIMENTS: (0, 180, 730),
    FoodCategory.FROZEN: (180, 1, 1),
    FoodCategory.CANNED: (0, 0, 1095),
    FoodCategory.SNACKS: (0, 0, 120),
    FoodCategory.OTHER: (180, 7, 30),
}

_STORAGE_INDEX: dict[StorageLocation, int] = {
    StorageLocation.FREEZER: 0,
    StorageLocation.REFRIGERATOR: 1,
    StorageLocation.PANTRY: 2,
}


def _first_match(name: str, keywords: tuple[str, ...]) -> str | None:
    for keyword in keywords:
        if matches_keyword(name, keyword):
            return keyword
    return None


class KeywordFoodClassifier(FoodClassifier):
    """Classify names by ordered keyword lists."""

    def classify(self, name: str) -> Classification:
        normalized = normalize_name(name)
        for category, keywords in CATEGORY_KEYWORDS.items():
            if _first_match(normalized, keywords):
                return category, CATEGORY_EMOJI[category]
        return FoodCategory.OTHER, CATEGORY_EMOJI[FoodCategory.OTHER]

    def classify_batch(self, names: list[str]) -> list[Classification]:
        return [self.classify(name) for name in names]


class KeywordStorageAdvisor(StorageAdvisor):
    """
    Recommend storage from specific food lists, then by category.

    Freezer foods are checked first, then refrigerator, then pantry, so
    "frozen berries" lands in the freezer even though berries are chilled.
    """

    def recommend_storage(self, name: str, category: FoodCategory) -> StorageLocation:
        normalized = normalize_name(name)
        for location, foods in (
            (StorageLocation.FREEZER, FREEZER_FOODS),
            (StorageLocation.REFRIGERATOR, REFRIGERATOR_FOODS),
            (StorageLocation.PANTRY, PANTRY_FOODS),
        ):
            if _first_match(normalized, foods):
                return location
        return CATEGORY_STORAGE.get(FoodCategory.from_label(category), StorageLocation.PANTRY)


class CategoryShelfLifeTable(ShelfLifeTable):
    """Shelf life from a per-food table with a per-category fallback."""

    def shelf_life_days(self, name: str, category: FoodCategory, storage: StorageLocation) -> int:
        normalized = normalize_name(name)
        column = _STORAGE_INDEX[StorageLocation(storage)]

        # Longest key first so "三文鱼" wins over "鱼"
        for food in sorted(FOOD_SHELF_LIFE, key=len, reverse=True):
            if matches_keyword(normalized, food):
                return FOOD_SHELF_LIFE[food][column]

        days = CATEGORY_SHELF_LIFE[FoodCategory.from_label(category)][column]
        logger.debug(f"No specific shelf life for '{normalized}', using {category} default of {days} days")
        return days
