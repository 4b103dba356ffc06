from __future__ import annotations

import re

__all__ = [
    "GROUP_ORDER",
    "CATEGORY_ICONS",
    "CATEGORY_COLORS",
    "CATEGORY_GROUPS",
    "DEFAULT_ICON",
    "DEFAULT_COLOR",
    "normalize_category_slug",
    "group_order",
    "category_icon",
    "category_color",
    "parent_group",
    "is_group",
]

# Navigation order of the top-level groups on the public site.
GROUP_ORDER: tuple[str, ...] = (
    "world",
    "counties",
    "politics",
    "business",
    "sports",
    "entertainment",
    "tech",
    "health",
    "education",
    "crime-security",
    "opinion",
    "lifestyle",
    "other",
)

DEFAULT_ICON = "📰"
DEFAULT_COLOR = "#34495e"

CATEGORY_ICONS: dict[str, str] = {
    "world": "🌍",
    "counties": "🏢",
    "politics": "🏛️",
    "business": "💼",
    "opinion": "💭",
    "sports": "⚽",
    "lifestyle": "🎭",
    "entertainment": "🎉",
    "tech": "💻",
    "health": "🏥",
    "education": "📚",
    "crime-security": "🚔",
    "other": "📌",
}

CATEGORY_COLORS: dict[str, str] = {
    "world": "#2563eb",
    "counties": "#3498db",
    "politics": "#e74c3c",
    "business": "#2ecc71",
    "opinion": "#9b59b6",
    "sports": "#f39c12",
    "lifestyle": "#e91e63",
    "entertainment": "#ff6b6b",
    "tech": "#1abc9c",
    "health": "#16a085",
    "education": "#3498db",
    "crime-security": "#c0392b",
    "other": "#34495e",
}

CATEGORY_GROUPS: dict[str, tuple[str, ...]] = {
    "world": ("national", "east-africa", "africa", "international", "live", "world-reports"),
    "counties": (
        "nairobi",
        "coast",
        "mountain",
        "lake-region",
        "rift-valley",
        "northern",
        "eastern",
        "western",
        "county-reports",
    ),
    "politics": (
        "politics",
        "governance",
        "legal",
        "elections",
        "parliament",
        "political-reports",
        "politics-others",
    ),
    "business": (
        "business",
        "companies",
        "finance-markets",
        "investment",
        "enterprise",
        "economy",
        "banking",
        "jobs-careers",
        "real-estate",
        "agriculture",
        "business-reports",
    ),
    "opinion": (
        "opinion",
        "editorials",
        "columnists",
        "bloggers",
        "letters",
        "trail-blazing",
        "ai-graphics",
        "analysis",
    ),
    "sports": (
        "sports",
        "sport",
        "football",
        "athletics",
        "rugby",
        "motorsport",
        "sports-vybe",
        "cricket",
        "team-news",
        "football-transfers",
        "other-sports",
        "sports-others",
    ),
    "lifestyle": (
        "lifestyle",
        "motoring",
        "culture",
        "family",
        "relationships",
        "travel",
        "wellness",
        "fashion",
        "food",
        "religion-faith",
        "lifestyle-others",
    ),
    "entertainment": (
        "entertainment",
        "buzz",
        "trending",
        "trending-pics",
        "gossip",
        "life-stories",
        "music",
        "movies",
        "celebrity",
        "entertainment-others",
    ),
    "tech": (
        "tech",
        "technology",
        "innovations",
        "gadgets",
        "startups",
        "digital-life",
        "ai",
        "mobile",
        "gaming",
        "tech-reports",
        "tech-others",
    ),
    "health": (
        "health",
        "medical-news",
        "wellness-fitness",
        "mental-health",
        "chronic-illnesses",
        "traditional-medicine",
    ),
    "education": (
        "education",
        "primary-secondary",
        "universities",
        "exams-results",
        "scholarships",
        "teachers-tsc",
    ),
    "crime-security": (
        "crime-security",
        "crime-news",
        "court-cases",
        "police-news",
        "road-accidents",
    ),
    "other": (
        "other",
        "others",
        "human-rights",
        "climate-crisis",
        "investigations",
        "interactives",
        "features",
        "in-pictures",
        "special-reports",
    ),
}

# Display names used in menus that do not slugify to their group slug.
_NAME_TO_SLUG: dict[str, str] = {
    "Home": "home",
    "World": "world",
    "Live & World": "world",
    "Counties": "counties",
    "Politics": "politics",
    "Business": "business",
    "Opinion": "opinion",
    "Sports": "sports",
    "Life & Style": "lifestyle",
    "Lifestyle": "lifestyle",
    "Entertainment": "entertainment",
    "Technology": "tech",
    "Tech": "tech",
    "Crime & Security": "crime-security",
}

_NON_SLUG_RE = re.compile(r"[^a-z0-9-]")
_DASHES_RE = re.compile(r"-+")


def normalize_category_slug(value: str) -> str:
    """Map a display name or loose slug to the canonical slug."""
    name = value.strip()
    if name in _NAME_TO_SLUG:
        return _NAME_TO_SLUG[name]
    slug = _NON_SLUG_RE.sub("-", name.lower())
    slug = _DASHES_RE.sub("-", slug)
    return slug.strip("-")


def group_order(slug: str) -> int:
    """Position of a group in the navigation, -1 when unknown."""
    try:
        return GROUP_ORDER.index(slug)
    except ValueError:
        return -1


def category_icon(slug: str) -> str:
    return CATEGORY_ICONS.get(slug, DEFAULT_ICON)


def category_color(slug: str) -> str:
    return CATEGORY_COLORS.get(slug, DEFAULT_COLOR)


def is_group(slug: str) -> bool:
    return slug in CATEGORY_GROUPS


def parent_group(slug: str) -> str | None:
    """Return the group a leaf category belongs to, if any."""
    for group, members in CATEGORY_GROUPS.items():
        if slug in members:
            return group
    return None
