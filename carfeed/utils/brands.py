# carfeed/utils/brands.py
from typing import Sequence, Tuple

# Checked in this order; first substring hit wins.
BRAND_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("toyota", "toyota"),
    ("volkswagen", "volkswagen"),
    ("vw", "volkswagen"),
    ("mazda", "mazda"),
    ("hyundai", "hyundai"),
    ("bmw", "bmw"),
    ("mercedes", "mercedes"),
    ("mercedes-benz", "mercedes"),
    ("ford", "ford"),
    ("nissan", "nissan"),
    ("honda", "honda"),
    ("audi", "audi"),
    ("kia", "kia"),
    ("chevrolet", "chevrolet"),
    ("opel", "opel"),
    ("renault", "renault"),
    ("suzuki", "suzuki"),
    ("isuzu", "isuzu"),
    ("jeep", "jeep"),
    ("land rover", "land rover"),
    ("porsche", "porsche"),
    ("volvo", "volvo"),
    ("peugeot", "peugeot"),
    ("fiat", "fiat"),
    ("mitsubishi", "mitsubishi"),
    ("subaru", "subaru"),
    ("lexus", "lexus"),
    ("jaguar", "jaguar"),
    ("mini", "mini"),
    ("alfa romeo", "alfa romeo"),
    ("haval", "haval"),
    ("gwm", "gwm"),
    ("chery", "chery"),
    ("baic", "baic"),
    ("mahindra", "mahindra"),
    ("tata", "tata"),
)

OTHER = "other"

BRAND_TAGS = frozenset(tag for _, tag in BRAND_KEYWORDS) | {OTHER}


def classify(title: str | None, table: Sequence[Tuple[str, str]] = BRAND_KEYWORDS) -> str:
    lower = (title or "").lower()
    for keyword, tag in table:
        if keyword in lower:
            return tag
    return OTHER
