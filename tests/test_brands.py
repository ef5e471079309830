# tests/test_brands.py
import pytest

from carfeed.utils.brands import BRAND_KEYWORDS, BRAND_TAGS, classify


@pytest.mark.parametrize(
    "title,expected",
    [
        ("2019 Toyota Corolla 1.8 XS", "toyota"),
        ("VW Polo Vivo 1.4 Trendline", "volkswagen"),
        ("2017 Volkswagen Golf 7 GTI", "volkswagen"),
        ("Mercedes-Benz C200 Avantgarde", "mercedes"),
        ("2020 LAND ROVER Defender 110", "land rover"),
        ("Alfa Romeo Giulia Veloce", "alfa romeo"),
        ("2022 haval jolion 1.5T", "haval"),
        ("GWM P-Series 2.0 LT", "gwm"),
    ],
)
def test_known_brand_anywhere_in_title(title, expected):
    assert classify(title) == expected


@pytest.mark.parametrize("title", ["2018 Lada Niva 4x4", "", "   ", None])
def test_unmatched_title_is_other(title):
    assert classify(title) == "other"


def test_first_keyword_in_table_order_wins():
    # both brands appear; toyota precedes bmw in the table
    assert classify("BMW X3 traded in for a Toyota Hilux") == "toyota"


def test_table_can_be_substituted():
    table = (("bakkie", "utility"), ("toyota", "toyota"))
    assert classify("Toyota Hilux bakkie", table) == "utility"
    assert classify("Nissan Navara", table) == "other"


def test_every_tag_is_in_the_closed_set():
    assert "other" in BRAND_TAGS
    for keyword, tag in BRAND_KEYWORDS:
        assert classify(f"2015 {keyword.upper()} something") in BRAND_TAGS
        assert tag in BRAND_TAGS
