# carfeed/schemas.py
import math
import re
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Optional

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            n = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        # "R 189 900", "85,000 km", "R189 900.00"
        m = _NUMBER_RE.search(value.replace(" ", "").replace("\xa0", "").replace(",", ""))
        if not m:
            return None
        n = float(m.group(0))
    else:
        return None
    # huge digit runs and 1e400 overflow to inf
    return n if math.isfinite(n) else None


class ExtractedItem(BaseModel):
    """One listing as the extraction API returned it; nothing is trusted."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    price: Optional[float] = None
    year: Optional[int] = None
    mileage: Optional[int] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None

    @field_validator("title", "transmission", "fuel_type", "location", "image_url", "source_url", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> Optional[float]:
        return _to_number(v)

    @field_validator("mileage", mode="before")
    @classmethod
    def _mileage(cls, v: Any) -> Optional[int]:
        n = _to_number(v)
        return int(n) if n is not None else None

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, v: Any) -> Optional[int]:
        n = _to_number(v)
        if n is None or not 1900 <= n <= 2099:
            return None
        return int(n)


class RawListing(BaseModel):
    title: str
    price: Optional[float] = None
    year: int
    mileage: Optional[int] = None
    transmission: str
    fuel_type: str
    location: str
    image_url: str
    source_url: str
    site_name: str
    condition: str = "good"


class JobRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: Optional[int] = None
    fallback: bool = False
    site: Optional[str] = None

    @field_validator("limit")
    @classmethod
    def _limit(cls, v: Optional[int]) -> Optional[int]:
        # 0 or negative means "use the default"
        return v if v is not None and v > 0 else None


class JobResponse(BaseModel):
    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None
