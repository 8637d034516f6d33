"""Filter tags offered per category. Pure lookup by substring of the lowercased category name."""

DEFAULT_FILTER_OPTIONS = ["High Rated", "Nearby", "Budget-Friendly", "Local"]

# First match wins; order matters ("food" must not shadow a later, more specific rule).
CATEGORY_FILTER_RULES: list[tuple[tuple[str, ...], list[str]]] = [
    (("grocery",), ["Organic", "24/7", "Pickup Available", "Budget-Friendly", "Local", "High Rated"]),
    (("restaurant", "food"), ["Outdoor Seating", "Delivery", "Vegetarian", "Budget-Friendly", "High Rated", "Local"]),
    (("fitness", "gym"), ["Classes", "Pool", "Personal Training", "Budget-Friendly", "High Rated"]),
    (("medical", "health"), ["High Rated", "Nearby", "Specialist"]),
    (("school", "education"), ["High Rated", "Nearby", "Public", "Private"]),
    (("park", "recreation"), ["Nearby", "Free", "Family-Friendly", "Dog-Friendly"]),
    (
        ("faith", "church", "religious", "worship"),
        ["Catholic", "Baptist", "Methodist", "Lutheran", "Presbyterian", "Non-denominational", "High Rated", "Nearby"],
    ),
]


def get_category_filter_options(category: str) -> list[str]:
    category_lower = (category or "").lower()
    for needles, options in CATEGORY_FILTER_RULES:
        if any(n in category_lower for n in needles):
            return list(options)
    return list(DEFAULT_FILTER_OPTIONS)
