"""
StockMeta - Prompt Builder
Fixed instruction templates for each generation task, per platform.

Only the filename (and, for the category task, the sanitized keyword string)
is substituted into the templates.
"""

PLATFORM_ADOBE = "adobe"
PLATFORM_SHUTTERSTOCK = "shutterstock"
PLATFORMS = (PLATFORM_ADOBE, PLATFORM_SHUTTERSTOCK)

TASK_TITLE = "title"
TASK_DESCRIPTION = "description"
TASK_KEYWORDS = "keywords"
TASK_CATEGORY = "category"

PLATFORM_TASKS = {
    PLATFORM_ADOBE: (TASK_TITLE, TASK_KEYWORDS, TASK_CATEGORY),
    PLATFORM_SHUTTERSTOCK: (TASK_DESCRIPTION, TASK_KEYWORDS, TASK_CATEGORY),
}


# ─── Adobe Stock Categories ─────────────────────────────────────────────────────
ADOBE_STOCK_CATEGORIES = {
    1: "Animals",
    2: "Buildings and Architecture",
    3: "Business",
    4: "Drinks",
    5: "The Environment",
    6: "States of Mind",
    7: "Food",
    8: "Graphic Resources",
    9: "Hobbies and Leisure",
    10: "Industry",
    11: "Landscapes",
    12: "Lifestyle",
    13: "People",
    14: "Plants and Flowers",
    15: "Culture and Religion",
    16: "Science",
    17: "Social Issues",
    18: "Sports",
    19: "Technology",
    20: "Transport",
    21: "Travel"
}

CATEGORY_LIST_STR = "\n".join([f"{k}. {v}" for k, v in ADOBE_STOCK_CATEGORIES.items()])


# ─── Shutterstock Categories ─────────────────────────────────────────────────
SHUTTERSTOCK_CATEGORIES = [
    "Abstract", "Animals/Wildlife", "Arts", "Backgrounds/Textures", "Beauty/Fashion",
    "Buildings/Landmarks", "Business/Finance", "Celebrities", "Education", "Food and drink",
    "Healthcare/Medical", "Holidays", "Industrial", "Interiors", "Miscellaneous", "Nature",
    "Objects", "Parks/Outdoor", "People", "Religion", "Science", "Signs/Symbols",
    "Sports/Recreation", "Technology", "Transportation", "Vintage"
]

SHUTTERSTOCK_CATEGORY_LIST_STR = ", ".join(SHUTTERSTOCK_CATEGORIES)


# ─── Generation Parameters ────────────────────────────────────────────────────
# Category and title stay near-deterministic; keywords get a little breadth.
TASK_PARAMS = {
    PLATFORM_ADOBE: {
        TASK_TITLE: {"temperature": 0.3, "max_tokens": 500},
        TASK_KEYWORDS: {"temperature": 0.7, "max_tokens": 400},
        TASK_CATEGORY: {"temperature": 0.0, "max_tokens": 10},
    },
    PLATFORM_SHUTTERSTOCK: {
        TASK_DESCRIPTION: {"temperature": 0.5, "max_tokens": 300},
        TASK_KEYWORDS: {"temperature": 0.7, "max_tokens": 400},
        TASK_CATEGORY: {"temperature": 0.0, "max_tokens": 50},
    },
}


# ─── Templates ────────────────────────────────────────────────────────────────
_ADOBE_TITLE_SYSTEM = (
    "You are an expert AI assistant that generates short, SEO-friendly titles for stock icons. "
    "Your task is to create a title based on a given filename."
)

_ADOBE_TITLE_USER = """Create a very short stock image title for an icon with the following rules:
- Write in English
- Maximum 200 characters
- Do not include numbers from the filename
- A short description of what the asset represents
- Do not include the word "icon" or "symbol"
- Do not include double quote symbol
- Do not include single quote symbol
- Example: Minimalist icons for UIUX, featuring navigation, controls, and interactive elements. Ideal for modern apps and websites
Filename: {filename}"""

_ADOBE_KEYWORDS_SYSTEM = "You are an AI assistant who helps create metadata."

_ADOBE_KEYWORDS_USER = """Create a list of keywords for a stock icon with the following rules:
- Write in English
- Most important keywords first
- Most related keywords to filename first
- Maximum 49 keywords
- All lowercase
- Separate with commas
- Do not repeat words
- Do not include generic words like: vector, illustration, design, modern, professional, art, aesthetic, digital
- Focus only on the meaning and function of the icon
- Example for "Expand Icon": expand, arrow, enlarge, fullscreen, maximize, resize, interface, ui, ux, button, zoom, navigation, symbol, direction, screen
Filename: {filename}"""

_ADOBE_CATEGORY_SYSTEM = (
    "You are an AI assistant that categorizes stock icons into Adobe Stock categories. "
    "You must respond with ONLY a number from 1-21."
)

_ADOBE_CATEGORY_USER = """Determine the most appropriate Adobe Stock category (1-21) for this icon:

Filename: {filename}
Keywords: {keywords}

Categories:
{categories}

Respond with ONLY the category number (1-21):"""

_SS_DESCRIPTION_SYSTEM = (
    "You are an expert AI assistant that generates detailed descriptions for stock media. "
    "Create unique and detailed descriptions in English."
)

_SS_DESCRIPTION_USER = """Create a unique and detailed description for this stock icon/media with the following rules:
- Write in English
- Maximum 200 characters
- Be descriptive and specific
- Focus on what the icon represents and its potential uses
- Do not include quotes
- Example: Minimalist home icon perfect for real estate websites, mobile apps, and user interfaces. Clean line art style suitable for modern digital designs.
Filename: {filename}"""

_SS_KEYWORDS_SYSTEM = "You are an AI assistant who helps create metadata for stock media."

_SS_KEYWORDS_USER = """Create a list of keywords for this stock icon with the following rules:
- Write in English
- Maximum 50 keywords
- Separate with commas
- Focus on the meaning, function, and visual style of the icon
- Include both specific and general terms
- Example: home, house, building, real estate, property, residential, architecture, dwelling, shelter, roof
Filename: {filename}"""

_SS_CATEGORY_SYSTEM = (
    "You are an AI assistant that categorizes stock media into Shutterstock categories. "
    "You must respond with 1-2 category names separated by commas."
)

_SS_CATEGORY_USER = """Determine the most appropriate Shutterstock categories for this icon:

Filename: {filename}
Keywords: {keywords}

Available Categories:
{categories}

Respond with 1-2 most relevant category names separated by commas:"""

_TEMPLATES = {
    (PLATFORM_ADOBE, TASK_TITLE): (_ADOBE_TITLE_SYSTEM, _ADOBE_TITLE_USER),
    (PLATFORM_ADOBE, TASK_KEYWORDS): (_ADOBE_KEYWORDS_SYSTEM, _ADOBE_KEYWORDS_USER),
    (PLATFORM_ADOBE, TASK_CATEGORY): (_ADOBE_CATEGORY_SYSTEM, _ADOBE_CATEGORY_USER),
    (PLATFORM_SHUTTERSTOCK, TASK_DESCRIPTION): (_SS_DESCRIPTION_SYSTEM, _SS_DESCRIPTION_USER),
    (PLATFORM_SHUTTERSTOCK, TASK_KEYWORDS): (_SS_KEYWORDS_SYSTEM, _SS_KEYWORDS_USER),
    (PLATFORM_SHUTTERSTOCK, TASK_CATEGORY): (_SS_CATEGORY_SYSTEM, _SS_CATEGORY_USER),
}


def build_prompt(task, filename, platform, context=None):
    """
    Build the system + user prompt pair for one generation task.

    Args:
        task: "title", "description", "keywords" or "category"
        filename: Asset filename, used verbatim
        platform: "adobe" or "shutterstock"
        context: Sanitized keyword string (category task only)

    Returns:
        (system_prompt, user_prompt) tuple
    """
    template = _TEMPLATES.get((platform, task))
    if template is None:
        raise ValueError(f"No prompt template for task {task!r} on platform {platform!r}")
    system_prompt, user_template = template

    if task == TASK_CATEGORY:
        categories = CATEGORY_LIST_STR if platform == PLATFORM_ADOBE else SHUTTERSTOCK_CATEGORY_LIST_STR
        user_prompt = user_template.format(filename=filename, keywords=context or "", categories=categories)
    else:
        user_prompt = user_template.format(filename=filename)

    return system_prompt, user_prompt


def get_task_params(platform, task):
    """Return a copy of the generation parameters for a platform task."""
    return dict(TASK_PARAMS[platform][task])
