# src/app/services/keywords/taxonomy.py
"""
Static tables behind keyword generation.

Order matters in every table here: categories are scanned in list order,
combination rules and priorities are evaluated top to bottom, and the first
rule that applies wins. New domain patterns are handled by extending a table.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.app.domain.models import WebsiteTheme


@dataclass(frozen=True)
class ThemeCategory:
    """
    One theme the domain analysis can detect.

    `focus` and `keyword_term` may contain "{match}", replaced by the display
    form of the pattern that matched.
    """
    id: str
    patterns: tuple[str, ...]
    focus: str
    confidence: float
    label: str
    keyword_term: Optional[str] = None


THEME_CATEGORIES: tuple[ThemeCategory, ...] = (
    ThemeCategory("beverages", ("sip", "drink", "float", "spritz", "cocktail", "mocktail", "brew", "juice", "beverage", "liquid"),
                  "drinks beverages", 0.9, "beverage/drink site", "drinks"),
    ThemeCategory("cooking_method", ("airfryer", "air-fryer", "slowcook", "slow-cook", "crockpot", "grill", "pressure", "instant", "smoker", "bake", "fry", "roast"),
                  "{match} cooking", 0.85, "{match} cooking site", "{match}"),
    ThemeCategory("dietary", ("keto", "paleo", "vegan", "protein", "healthy", "sugar-free", "low-carb", "gluten-free", "dairy-free"),
                  "{match} recipes", 0.9, "{match} diet site", "{match}"),
    ThemeCategory("meal_type", ("breakfast", "dinner", "lunch", "snack", "dessert", "brunch", "appetizer", "side"),
                  "{match} recipes", 0.8, "{match} focused site", "{match}"),
    ThemeCategory("baking", ("dough", "bake", "bread", "pastry", "cake", "cookie", "sweet", "sugar", "flour"),
                  "baking desserts", 0.85, "baking/dessert site"),
    ThemeCategory("cuisine", ("italian", "mexican", "asian", "indian", "mediterranean", "french", "chinese", "japanese"),
                  "{match} recipes", 0.8, "{match} cuisine site"),
    ThemeCategory("comfort", ("comfort", "cozy", "hearty", "warm", "comforting"),
                  "comfort food", 0.8, "comfort food site", "comfort food"),
    ThemeCategory("budget", ("budget", "cheap", "affordable", "frugal", "economical"),
                  "budget-friendly recipes", 0.8, "budget cooking site", "budget-friendly"),
    ThemeCategory("speed", ("quick", "fast", "easy", "simple", "rapid", "speedy", "instant"),
                  "quick easy recipes", 0.8, "quick cooking site", "quick"),
    ThemeCategory("frozen", ("frozen", "freeze", "freezer"),
                  "frozen meals", 0.9, "frozen meal site", "frozen meals"),
    ThemeCategory("meal_prep", ("meal", "mealhq", "mealprep", "meal-prep", "prep"),
                  "meal prep recipes", 0.85, "meal prep site", "meal prep"),
    ThemeCategory("protein", ("protein", "meat", "chicken", "beef", "pork"),
                  "protein recipes", 0.85, "protein-focused site"),
    ThemeCategory("vegetarian", ("veg", "vegetarian", "plant", "veggie"),
                  "vegetarian recipes", 0.85, "vegetarian site"),
    ThemeCategory("slow_cook", ("slow", "crockpot", "slowcook", "slow-cook", "slowcooker", "slow-cooker"),
                  "slow cooker recipes", 0.85, "slow cooking site"),
    ThemeCategory("one_pot", ("onepot", "one-pot", "skillet", "pan"),
                  "one pot meals", 0.85, "one pot cooking site", "one pot"),
    ThemeCategory("sheet_pan", ("sheetpan", "sheet-pan", "tray"),
                  "sheet pan recipes", 0.85, "sheet pan cooking site", "sheet pan"),
    ThemeCategory("candy", ("candy", "sweet", "sweets", "treats", "crunch", "cloud"),
                  "candy recipes", 0.95, "candy site", "candy"),
    ThemeCategory("dessert", ("dessert", "desserts", "sugar", "sweet", "cake", "cookie", "chocolate"),
                  "dessert recipes", 0.9, "dessert site", "dessert"),
    ThemeCategory("garden", ("balcony", "harvest", "garden", "farm", "homegrown", "organic", "fresh", "grow"),
                  "garden recipes", 0.9, "garden/harvest site", "harvest"),
    ThemeCategory("seasonal", ("harvest", "seasonal", "fresh", "spring", "summer", "fall", "autumn", "winter"),
                  "seasonal recipes", 0.85, "seasonal cooking site", "seasonal"),
    ThemeCategory("location", ("balcony", "backyard", "patio", "indoor", "outdoor", "home", "kitchen"),
                  "home cooking", 0.8, "home cooking site"),
    ThemeCategory("kitchen_style", ("kitchen", "cook", "chef", "homemade", "scratch", "cooking", "recipes"),
                  "kitchen recipes", 0.8, "kitchen-focused site", "kitchen"),
    ThemeCategory("quality", ("premium", "artisan", "gourmet", "handcrafted", "authentic", "traditional"),
                  "gourmet recipes", 0.85, "premium cooking site"),
    ThemeCategory("size", ("mini", "small", "bite", "bites", "hq", "hub", "spot", "corner"),
                  "bite-sized recipes", 0.8, "small portion site"),
)

CATEGORIES_BY_ID = {category.id: category for category in THEME_CATEGORIES}

# How a matched pattern reads inside a keyword
PATTERN_DISPLAY = {
    "airfryer": "air fryer",
    "air-fryer": "air fryer",
    "slowcook": "slow cooker",
    "slow-cook": "slow cooker",
    "sugar-free": "sugar free",
    "low-carb": "low carb",
}


@dataclass(frozen=True)
class FocusRule:
    """A combination of detected categories that overrides the single-category focus."""
    requires: tuple[str, ...]
    focus: str
    confidence: float
    reasoning: str


FOCUS_RULES: tuple[FocusRule, ...] = (
    FocusRule(("frozen", "meal_prep"), "frozen meals", 0.95, "frozen and meal themes - frozen meal site"),
    FocusRule(("one_pot", "meal_prep"), "one pot meals", 0.95, "one pot and meal themes - one pot meal site"),
    FocusRule(("sheet_pan", "meal_type"), "sheet pan meals", 0.95, "sheet pan and meal type themes - sheet pan meal site"),
    FocusRule(("garden", "seasonal"), "harvest recipes", 0.95, "garden and seasonal themes - harvest cooking site"),
    FocusRule(("garden", "kitchen_style"), "garden kitchen recipes", 0.95, "garden and kitchen themes - garden kitchen site"),
    FocusRule(("location", "garden"), "home garden recipes", 0.9, "location and garden themes - home garden site"),
    FocusRule(("frozen",), "frozen meals", 0.9, "frozen theme - frozen meal site"),
    FocusRule(("one_pot",), "one pot meals", 0.9, "one pot theme - one pot cooking site"),
    FocusRule(("sheet_pan",), "sheet pan recipes", 0.9, "sheet pan theme - sheet pan cooking site"),
    FocusRule(("garden",), "garden recipes", 0.9, "garden theme - garden cooking site"),
    FocusRule(("seasonal",), "seasonal recipes", 0.85, "seasonal theme - seasonal cooking site"),
    FocusRule(("meal_prep",), "meals", 0.85, "meal theme - meal-focused site"),
)


@dataclass(frozen=True)
class SubstringOverride:
    """Exact domain substrings that pin the focus regardless of categories."""
    substrings: tuple[str, ...]
    focus: str
    confidence: float
    reasoning: str


SUBSTRING_OVERRIDES: tuple[SubstringOverride, ...] = (
    SubstringOverride(("mocktail", "mock"), "mocktails alcohol-free cocktails", 0.95, "mocktail site"),
    SubstringOverride(("sip",), "drinks beverages", 0.9, "drink site"),
    SubstringOverride(("airfryer", "air-fryer"), "air fryer recipes", 0.95, "air fryer cooking site"),
    SubstringOverride(("candy", "crunch", "cloud"), "candy recipes", 0.95, "candy site"),
)

# Combinations that fix the themed keyword phrase outright
KEYWORD_COMBINATIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("garden", "seasonal"), "harvest recipes"),
    (("garden", "kitchen_style"), "garden kitchen recipes"),
    (("location", "garden"), "home garden recipes"),
    (("frozen", "meal_prep"), "frozen meals"),
    (("one_pot", "meal_prep"), "one pot meals"),
    (("sheet_pan", "meal_type"), "sheet pan meals"),
)

# Which single detected category drives a themed keyword when no combination applies
KEYWORD_PRIORITY: tuple[str, ...] = (
    "garden", "seasonal", "candy", "dessert", "beverages", "meal_type",
    "frozen", "meal_prep", "one_pot", "sheet_pan", "cooking_method",
    "dietary", "comfort", "budget", "speed", "kitchen_style",
)

GENERIC_FOCUS = "recipes"
GENERIC_CONFIDENCE = 0.5

# Vocabulary recognised inside concatenated domain names
COMPOUND_VOCABULARY: tuple[str, ...] = (
    "kitchen", "cook", "cooking", "recipes", "food", "meals", "dinner", "lunch", "breakfast",
    "harvest", "garden", "farm", "fresh", "organic", "homegrown", "seasonal",
    "balcony", "backyard", "patio", "indoor", "outdoor", "home",
    "comfort", "cozy", "hearty", "warm", "comforting",
    "budget", "cheap", "affordable", "frugal", "economical",
    "quick", "fast", "easy", "simple", "rapid", "speedy", "instant",
    "frozen", "freeze", "freezer", "meal", "mealhq", "mealprep", "prep",
    "airfryer", "grill", "bake", "fry", "roast", "slowcook",
    "onepot", "sheetpan", "skillet", "pan",
    "keto", "paleo", "vegan", "protein", "healthy",
    "dessert", "desserts", "sugar", "sweet", "cake", "cookie", "chocolate",
    "candy", "sweets", "treats", "crunch", "cloud",
    "beverages", "drinks", "cocktails", "mocktails", "juice", "brew",
    "hq", "hub", "spot", "corner", "authority", "master", "expert",
)

# Words that may not repeat inside one keyword
FILLER_WORDS = frozenset({"recipes", "recipe", "drinks", "beverages", "cooking", "meals", "food", "ideas", "dishes"})

# Domain identity checks
SWEETS_TOKENS: tuple[str, ...] = ("candy", "sweet", "crunch")
MEAT_TERMS: tuple[str, ...] = ("pork", "beef", "chicken", "meat", "protein")
CANDY_SAFE_KEYWORDS: tuple[tuple[str, float], ...] = (
    ("candy recipes", 0.95),
    ("sweet treats", 0.9),
    ("homemade candy", 0.85),
)

RECIPE_CATEGORIES: tuple[str, ...] = (
    "chicken recipes", "beef recipes", "pork recipes", "fish recipes", "seafood recipes",
    "vegetable recipes", "pasta recipes", "rice recipes", "soup recipes", "salad recipes",
    "dessert recipes", "breakfast recipes", "lunch recipes", "dinner recipes", "snack recipes",
    "appetizer recipes", "side dish recipes", "main course recipes", "healthy recipes",
    "quick recipes", "easy recipes", "one-pot recipes", "sheet pan recipes", "slow cooker recipes",
    "grilled recipes", "baked recipes", "fried recipes", "steamed recipes", "roasted recipes",
)

# (domain triggers, rotation list); first trigger hit narrows the rotation
DOMAIN_CATEGORY_LISTS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("candy", "sweet", "crunch", "cloud"), (
        "dessert recipes", "sweet treats", "homemade candy", "chocolate recipes",
        "baking recipes", "sugar recipes", "candy recipes", "treat recipes",
    )),
    (("garden", "harvest", "balcony", "farm"), (
        "vegetable recipes", "garden recipes", "harvest recipes", "fresh produce recipes",
        "plant-based recipes", "organic recipes", "homegrown recipes", "seasonal recipes",
    )),
    (("sip", "drink", "beverage", "mocktail"), (
        "drink recipes", "beverage recipes", "cocktail recipes", "mocktail recipes",
        "juice recipes", "smoothie recipes", "tea recipes", "coffee recipes",
    )),
    (("airfryer", "air-fryer"), (
        "air fryer recipes", "crispy recipes", "healthy fried recipes", "quick air fryer meals",
        "air fryer chicken", "air fryer vegetables", "air fryer snacks", "air fryer desserts",
    )),
    (("keto",), (
        "keto recipes", "low-carb recipes", "keto meals", "keto snacks",
        "keto desserts", "keto breakfast", "keto dinner", "keto lunch",
    )),
    (("veg", "vegetarian", "plant"), (
        "vegetarian recipes", "plant-based recipes", "veggie recipes", "meatless recipes",
        "vegetable recipes", "vegan recipes", "plant protein recipes", "green recipes",
    )),
    (("budget", "cheap", "affordable"), (
        "budget recipes", "cheap meals", "affordable recipes", "frugal recipes",
        "budget-friendly recipes", "economical recipes", "low-cost recipes", "value recipes",
    )),
    (("quick", "fast", "easy"), (
        "quick recipes", "fast meals", "easy recipes", "30-minute recipes",
        "quick dinner", "fast lunch", "easy breakfast", "speedy recipes",
    )),
    (("brunch", "bright"), (
        "brunch recipes", "breakfast recipes", "morning recipes", "brunch ideas",
        "breakfast casseroles", "pancake recipes", "waffle recipes", "egg recipes",
        "brunch cocktails", "morning smoothies", "breakfast pastries", "brunch sides",
    )),
    (("comfort", "cozy", "hearty"), (
        "comfort food", "hearty recipes", "cozy recipes", "comforting meals",
        "warm recipes", "soul food", "comforting dishes", "homey recipes",
    )),
)

DESCRIPTIVE_ADJECTIVES = ("easy", "quick", "healthy", "delicious", "best", "simple", "amazing")
MEAL_WORDS = ("recipes", "ideas", "dishes", "meals", "food")
PREP_STYLES = ("homemade", "quick", "easy", "healthy", "traditional")

SEASON_WORDS = {
    "winter": ("winter", "cozy", "warming", "comforting"),
    "spring": ("spring", "fresh", "light", "renewing"),
    "summer": ("summer", "refreshing", "cool", "bright"),
    "fall": ("fall", "autumn", "harvest", "warming"),
}


def season_for_month(month: int) -> str:
    """month is 1-12"""
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "fall"


def holidays_for(month: int, day: int) -> tuple[str, ...]:
    if month == 12:
        return ("christmas", "holiday", "festive")
    if month == 11 and day >= 20:
        return ("thanksgiving", "thanksgiving dinner")
    if month == 10:
        return ("halloween", "spooky")
    if month == 2:
        return ("valentine", "valentines day")
    if month == 7:
        return ("4th of july", "independence day")
    if month == 3 and day >= 15:
        return ("easter", "spring celebration")
    return ()


KNOWN_WEBSITE_THEMES: tuple[WebsiteTheme, ...] = (
    WebsiteTheme("airfryerauthority.com", "Air Fryer Authority", "air fryer cooking",
                 ["healthy cooking", "quick meals", "crispy foods"], cooking_method="air frying",
                 target_audience="health-conscious home cooks"),
    WebsiteTheme("antiinflammatorytable.com", "Anti-Inflammatory Table", "anti-inflammatory foods",
                 ["healing foods", "wellness", "chronic pain relief"], dietary_focus="anti-inflammatory",
                 target_audience="people with inflammation issues"),
    WebsiteTheme("bluezonefeast.com", "Blue Zone Feast", "longevity foods",
                 ["Mediterranean diet", "plant-based", "healthy aging"], dietary_focus="longevity",
                 target_audience="longevity-focused individuals"),
    WebsiteTheme("ketoterraneantable.com", "Keto-terranean Table", "keto Mediterranean",
                 ["low-carb", "Mediterranean flavors", "healthy fats"], cuisine_type="Mediterranean",
                 dietary_focus="keto"),
    WebsiteTheme("oliveketokitchen.com", "Olive Keto Kitchen", "keto recipes",
                 ["low-carb", "high-fat", "ketogenic"], dietary_focus="keto", target_audience="keto dieters"),
    WebsiteTheme("primalfeastkitchen.com", "Primal Feast Kitchen", "paleo recipes",
                 ["ancestral eating", "whole foods", "grain-free"], dietary_focus="paleo",
                 target_audience="paleo followers"),
    WebsiteTheme("budgertbiteshq.com", "Budget Bites HQ", "budget-friendly meals",
                 ["affordable cooking", "meal planning", "frugal living"],
                 target_audience="budget-conscious families"),
    WebsiteTheme("quickdinnerhub.com", "Quick Dinner Hub", "quick dinner recipes",
                 ["30-minute meals", "weeknight dinners", "time-saving"], cooking_method="quick cooking",
                 target_audience="busy families"),
    WebsiteTheme("comfortfoodcozy.com", "Comfort Food Cozy", "comfort food",
                 ["hearty meals", "family favorites", "cozy cooking"], target_audience="comfort food lovers"),
    WebsiteTheme("grillandchillkitchen.com", "Grill and Chill Kitchen", "grilling recipes",
                 ["outdoor cooking", "BBQ", "summer foods"], cooking_method="grilling",
                 target_audience="grilling enthusiasts"),
    WebsiteTheme("soupandstewhq.com", "Soup and Stew HQ", "soup and stew recipes",
                 ["one-pot meals", "hearty soups", "comfort food"], cooking_method="simmering",
                 target_audience="soup lovers"),
    WebsiteTheme("saladsavy.com", "Salad Savy", "salad recipes",
                 ["healthy eating", "fresh ingredients", "light meals"], dietary_focus="healthy",
                 target_audience="health-conscious eaters"),
    WebsiteTheme("doughwhisperer.com", "Dough Whisperer", "bread and baking",
                 ["artisan bread", "homemade baking", "yeast recipes"], cooking_method="baking",
                 target_audience="baking enthusiasts"),
    WebsiteTheme("sugarrushkitchen.com", "Sugar Rush Kitchen", "dessert recipes",
                 ["sweet treats", "baking", "indulgent desserts"], cooking_method="baking",
                 target_audience="dessert lovers"),
    WebsiteTheme("thesipspot.com", "The Sip Spot", "drink recipes",
                 ["beverages", "cocktails", "mocktails"], target_audience="drink enthusiasts"),
    WebsiteTheme("crunchcloudcandy.com", "Crunch Cloud Candy", "candy recipes",
                 ["sweet treats", "homemade candy", "desserts"], target_audience="candy lovers"),
    WebsiteTheme("balconyharvestkitchen.com", "Balcony Harvest Kitchen", "garden recipes",
                 ["harvest cooking", "fresh vegetable recipes", "homegrown meals"],
                 target_audience="garden enthusiasts"),
)
