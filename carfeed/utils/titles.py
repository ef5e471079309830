# carfeed/utils/titles.py
import re
from typing import NamedTuple, Optional

YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
MAX_MODEL_TOKENS = 3
FALLBACK = "car"

class MakeModel(NamedTuple):
    make: str
    model: str

def parse_make_model(title: Optional[str]) -> MakeModel:
    """Best-effort make/model from a free-text title.

    The first year token is dropped, the first remaining word is the make and
    up to three following words are the model. Missing parts become "car".
    """
    cleaned = YEAR_RE.sub("", title or "", count=1).strip()
    parts = cleaned.split()
    if not parts:
        return MakeModel(FALLBACK, FALLBACK)
    make = parts[0]
    model = " ".join(parts[1 : 1 + MAX_MODEL_TOKENS]) or FALLBACK
    return MakeModel(make, model)

def parse_year(title: Optional[str]) -> Optional[str]:
    m = YEAR_RE.search(title or "")
    return m.group(0) if m else None
