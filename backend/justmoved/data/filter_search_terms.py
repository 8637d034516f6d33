"""
Provider search terms per (category, filter) for filtered recommendations.
Keys are the exact category names the client sends; filters are the lowercase subfilter ids.
Unknown pairs search for the filter text itself.
"""

FILTER_SEARCH_TERMS: dict[str, dict[str, list[str]]] = {
    "Medical care": {
        "dental care": ["dentist", "dental office", "dental clinic"],
        "vision care": ["optometrist", "eye doctor", "vision center"],
        "urgent care": ["urgent care", "walk-in clinic", "immediate care"],
        "specialty care": ["specialist", "medical specialist", "specialty clinic"],
        "mental health": ["therapist", "counselor", "mental health clinic"],
        "pharmacy": ["pharmacy", "drugstore", "prescription"],
    },
    "Parks and recreation": {
        "dog parks": ["dog park", "pet park", "off-leash park"],
        "playgrounds": ["playground", "children's park", "family park"],
        "hiking trails": ["hiking trail", "nature trail", "walking trail"],
        "sports facilities": ["sports complex", "recreation center", "gym"],
        "community centers": ["community center", "recreation center"],
    },
    "Grocery stores": {
        "organic": ["organic grocery", "natural foods", "health food store"],
        "international": ["international grocery", "ethnic market", "specialty foods"],
        "specialty": ["specialty grocery", "gourmet market", "artisan foods"],
        "bulk": ["bulk foods", "warehouse store", "wholesale grocery"],
    },
    "Restaurants": {
        "family-friendly": ["family restaurant", "kid-friendly restaurant"],
        "fine dining": ["fine dining", "upscale restaurant", "gourmet restaurant"],
        "fast casual": ["fast casual", "quick service restaurant"],
        "takeout": ["takeout restaurant", "delivery restaurant"],
        "dietary restrictions": ["gluten-free restaurant", "vegan restaurant", "allergen-friendly"],
    },
}


def get_filter_search_terms(category: str, filter_name: str) -> list[str]:
    return FILTER_SEARCH_TERMS.get(category, {}).get(filter_name) or [filter_name]
