"""
Subfilter catalogue shown under each category. id is what gets sent as the filter;
label is for display. Lookups use the exact category name (no normalization).
"""
from typing import TypedDict


class Subfilter(TypedDict):
    id: str
    label: str
    category: str


def _subfilters(category: str, entries: list[tuple[str, str]]) -> list[Subfilter]:
    return [{"id": sid, "label": label, "category": category} for sid, label in entries]


SUBFILTERS_BY_CATEGORY: dict[str, list[Subfilter]] = {
    "Medical care": _subfilters("Medical care", [
        ("dental care", "Dental Care"),
        ("vision care", "Vision Care"),
        ("urgent care", "Urgent Care"),
        ("specialty care", "Specialty Care"),
        ("mental health", "Mental Health"),
        ("pharmacy", "Pharmacy"),
        ("primary care", "Primary Care"),
        ("pediatric", "Pediatric"),
    ]),
    "Parks and recreation": _subfilters("Parks and recreation", [
        ("dog parks", "Dog Parks"),
        ("playgrounds", "Playgrounds"),
        ("hiking trails", "Hiking Trails"),
        ("sports facilities", "Sports Facilities"),
        ("community centers", "Community Centers"),
        ("swimming", "Swimming"),
        ("tennis", "Tennis"),
        ("basketball", "Basketball"),
    ]),
    "Grocery stores": _subfilters("Grocery stores", [
        ("organic", "Organic"),
        ("international", "International"),
        ("specialty", "Specialty & Gourmet"),
        ("bulk", "Bulk & Warehouse"),
        ("budget", "Budget Friendly"),
        ("convenience", "Convenience"),
    ]),
    "Restaurants": _subfilters("Restaurants", [
        ("family-friendly", "Family Friendly"),
        ("fine dining", "Fine Dining"),
        ("fast casual", "Fast Casual"),
        ("takeout", "Takeout & Delivery"),
        ("vegan", "Vegan"),
        ("vegetarian", "Vegetarian"),
        ("gluten-free", "Gluten Free"),
        ("pizza", "Pizza"),
        ("chinese", "Chinese"),
        ("italian", "Italian"),
        ("mexican", "Mexican"),
        ("breakfast", "Breakfast & Brunch"),
        ("coffee", "Coffee & Cafes"),
    ]),
    "Fitness": _subfilters("Fitness", [
        ("yoga", "Yoga Studios"),
        ("pilates", "Pilates"),
        ("crossfit", "CrossFit"),
        ("swimming", "Swimming"),
        ("martial arts", "Martial Arts"),
        ("dance", "Dance Studios"),
        ("rock climbing", "Rock Climbing"),
        ("traditional gym", "Gyms & Fitness Centers"),
    ]),
    "Personal Care": _subfilters("Personal Care", [
        ("hair salon", "Hair Salons"),
        ("barbershop", "Barbershops"),
        ("nail salon", "Nail Salons"),
        ("spa", "Spas"),
        ("skincare", "Skincare"),
        ("massage", "Massage Therapy"),
        ("eyebrow", "Eyebrow Services"),
    ]),
    "Shopping": _subfilters("Shopping", [
        ("clothing", "Clothing & Fashion"),
        ("electronics", "Electronics"),
        ("home goods", "Home Goods"),
        ("books", "Books"),
        ("sporting goods", "Sporting Goods"),
        ("jewelry", "Jewelry"),
        ("shoes", "Shoes"),
    ]),
    "Banking": _subfilters("Banking", [
        ("banks", "Banks & Credit Unions"),
        ("atm", "ATMs"),
        ("investment", "Investment Services"),
    ]),
    "Auto services": _subfilters("Auto services", [
        ("repair", "Auto Repair"),
        ("oil change", "Oil Change"),
        ("car wash", "Car Wash"),
        ("gas station", "Gas Stations"),
        ("tires", "Tire Services"),
    ]),
    "Entertainment": _subfilters("Entertainment", [
        ("movies", "Movie Theaters"),
        ("bowling", "Bowling"),
        ("arcade", "Arcade & Games"),
        ("mini golf", "Mini Golf"),
        ("bars", "Bars & Nightlife"),
        ("live music", "Live Music"),
    ]),
}


def get_all_subfilters() -> list[Subfilter]:
    return [s for subs in SUBFILTERS_BY_CATEGORY.values() for s in subs]


def get_subfilters_for_category(category: str) -> list[Subfilter]:
    return SUBFILTERS_BY_CATEGORY.get(category, [])
