"""Defaults for the vision and recipe models that are tracked in Git."""

# Model version used by default. Can be overridden via env if needed.
DEFAULT_LLM_MODEL = "gpt-4o-mini"

VISION_TEMPERATURE = 0.2
RECIPE_TEMPERATURE = 0.9

DEFAULT_VISION_SYSTEM_PROMPT = (
    "Return strictly valid JSON. Never include commentary."
)

# Canonical user prompt for vision analysis requests.
VISION_USER_PROMPT = (
    "Analyze the kitchen photo and list visible edible ingredients.\n"
    "- Canonical lowercase names.\n"
    "- Include category if obvious (produce, dairy, protein, grain, "
    "condiment, spice, beverage).\n"
    "- Include confidence 0..1.\n"
    "- Exclude utensils/containers/brands.\n"
    "Output ONLY a JSON array of {name, category?, confidence, quantity?}."
)

# One instruction per enabled dietary filter, keyed by Filters attribute.
FILTER_CONSTRAINTS = {
    "quick": "Each recipe total time <= 30 minutes.",
    "vegetarian": "Strictly vegetarian (no meat/fish/gelatin).",
    "vegan": "Strictly vegan (no animal products).",
    "gluten_free": "Gluten-free.",
    "dairy_free": "Dairy-free.",
    "nut_free": "Peanut & tree-nut free.",
    "shellfish_free": "Shellfish-free.",
    "egg_free": "Egg-free.",
    "soy_free": "Soy-free.",
    "high_protein": "Higher protein focus.",
    "low_carb": "Lower carbohydrate focus.",
}

# Stock photo shown while recipe illustration is switched off.
PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1515003197210-e0cd71810b5f"
    "?w=800&q=80&auto=format&fit=crop"
)
