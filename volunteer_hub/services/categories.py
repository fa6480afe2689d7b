"""Static two-level volunteer job taxonomy.

Parent keys are stable identifiers; subcategories are addressed with composite
``parent:subcategory-slug`` values. The admin-editable ``job_categories`` table is
separate and never reconciled with this catalog.
"""
import re

VOLUNTEER_CATEGORIES: dict[str, dict] = {
    "administration-documentation": {
        "label": "Administration & Documentation",
        "subcategories": [
            "Administrative",
            "Data Entry",
            "Documentation",
            "Fundraising",
            "Grant Writing / Story Collection",
        ],
    },
    "construction-repair": {
        "label": "Construction & Repair",
        "subcategories": [
            "Heavy Lifting",
            "Construction",
            "Electrical Work",
            "Plumbing",
            "HVAC",
            "Roofing",
            "Debris Removal",
            "Tarp Installation / Temporary Repairs",
            "Damage Documentation / Media Support",
        ],
    },
    "health-safety": {
        "label": "Health & Safety",
        "subcategories": [
            "First Aid",
            "Medical Knowledge",
            "Mental Health Support",
            "Crisis Response",
            "Disability Support",
        ],
    },
    "community-support": {
        "label": "Community & Support",
        "subcategories": [
            "IT Support",
            "Translation",
            "Elder Care",
            "Childcare",
            "Pet Care",
            "Cleaning",
            "Shelter Support / Intake",
            "Legal Aid Navigation",
            "Phone Banking / Wellness Checks",
        ],
    },
    "education-outreach": {
        "label": "Education & Outreach",
        "subcategories": [
            "Comms & Social Media Outreach",
            "Community Awareness / Outreach",
            "Youth Education / Engagement",
            "Homework Help / Learning Support",
        ],
    },
    "logistics": {
        "label": "Logistics",
        "subcategories": [
            "Driving",
            "Transportation Coordination",
            "Donation Sorting / Distribution",
            "Digital Support / Form Assistance",
            "Shelter Registration Assistance",
        ],
    },
}

LEGACY_CATEGORY_MAPPING: dict[str, str] = {
    "Environment": "logistics",
    "Education": "education-outreach",
    "Human Services": "community-support",
    "Health": "health-safety",
    "Community": "community-support",
    "Arts & Culture": "education-outreach",
    "Sports & Recreation": "community-support",
    "Faith-based": "community-support",
    "Emergency Services": "health-safety",
    "Technology": "community-support",
    "Administrative": "administration-documentation",
    "Construction": "construction-repair",
    "Events": "logistics",
}

DEFAULT_LEGACY_CATEGORY = "community-support"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(label: str) -> str:
    # "Tarp Installation / Temporary Repairs" -> "tarp-installation-temporary-repairs"
    return _NON_ALNUM.sub("-", label.lower()).strip("-")


def get_flat_category_list() -> list[dict]:
    flat: list[dict] = []
    for parent_key, category in VOLUNTEER_CATEGORIES.items():
        flat.append({"value": parent_key, "label": category["label"], "parent": None})
        for sub in category["subcategories"]:
            flat.append({
                "value": f"{parent_key}:{slugify(sub)}",
                "label": sub,
                "parent": parent_key,
            })
    return flat


def get_subcategories(parent_key: str) -> list[str]:
    category = VOLUNTEER_CATEGORIES.get(parent_key)
    return list(category["subcategories"]) if category else []


def get_parent_category_label(parent_key: str) -> str:
    category = VOLUNTEER_CATEGORIES.get(parent_key)
    return category["label"] if category else ""


def parse_category_value(value: str) -> tuple[str, str | None]:
    """Split a category value into ``(parent, subcategory_slug)``."""
    if ":" in value:
        parent, sub = value.split(":", 1)
        return parent, sub
    return value, None


def get_category_display_label(value: str) -> str:
    parent_key, sub_slug = parse_category_value(value)
    category = VOLUNTEER_CATEGORIES.get(parent_key)
    if category is None:
        return value
    if sub_slug is None:
        return category["label"]
    for sub in category["subcategories"]:
        if slugify(sub) == sub_slug:
            return sub
    return value


def is_valid_category_value(value: str) -> bool:
    parent_key, sub_slug = parse_category_value(value)
    category = VOLUNTEER_CATEGORIES.get(parent_key)
    if category is None:
        return False
    if sub_slug is None:
        return True
    return any(slugify(sub) == sub_slug for sub in category["subcategories"])


def migrate_legacy_category(legacy_label: str) -> str:
    """Total mapping from a legacy label to a taxonomy key."""
    return LEGACY_CATEGORY_MAPPING.get(legacy_label, DEFAULT_LEGACY_CATEGORY)


def normalize_category(value: str) -> str | None:
    """Return a catalog value for ``value`` or None when it is neither a catalog value nor a legacy label."""
    if is_valid_category_value(value):
        return value
    if value in LEGACY_CATEGORY_MAPPING:
        return LEGACY_CATEGORY_MAPPING[value]
    return None
