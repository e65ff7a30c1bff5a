from __future__ import annotations

DEFAULT_CATEGORY = "other"

# Reihenfolge ist der Tie-Break: erste Kategorie mit Treffer gewinnt.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "smartphones": ("iphone", "samsung", "oneplus", "realme", "poco", "phone"),
    "laptops": ("laptop", "macbook", "dell", "hp", "asus", "lenovo"),
    "headphones": ("headphones", "earbuds", "airpods", "jbl", "bose", "earphone"),
    "clothing": ("shirt", "pants", "dress", "jacket", "jeans", "top"),
    "shoes": ("shoes", "sneakers", "boots", "nike", "adidas", "puma"),
    "home": ("lamp", "pillow", "bedsheet", "curtains", "furniture"),
    "books": ("book", "novel", "guide", "manual"),
    "electronics": ("tv", "refrigerator", "ac", "microwave", "oven"),
}


def classify_category(product_name: str) -> str:
    """Maps a product name to the first category with a keyword substring hit."""
    lower = product_name.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lower for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
