import pytest

from conftest import VALID_IMAGE
from rakugaki.domain.evaluation import Artwork, PreviousWork
from rakugaki.utils.formatting import build_share_text, format_price, format_price_readable


def test_format_price():
    assert format_price(1_000_000) == "¥1,000,000"
    assert format_price(50_000_000) == "¥50,000,000"
    assert format_price(0) == "¥0"


@pytest.mark.parametrize(
    "price, expected",
    [
        (5_000, "5,000円"),
        (1_000_000, "100万円"),
        (5_000_000, "500万円"),
        (15_000_000, "1,500万円"),
        (12_345_678, "1,234万円"),
        (100_000_000, "1億円"),
        (150_000_000, "1.5億円"),
        (1_000_000_000, "10億円"),
        (10_000_000_000, "100億円"),
    ],
)
def test_format_price_readable(price, expected):
    assert format_price_readable(price) == expected


def test_share_text_for_first_work(make_evaluation):
    artwork = Artwork.create(image=VALID_IMAGE, evaluation=make_evaluation(price=150_000_000))

    text = build_share_text(artwork)

    assert "「Silent Orbit」" in text
    assert "1.5億円" in text
    assert "シリーズ" not in text
    assert text.endswith("#RakugakiGallery #落書き美術館")


def test_share_text_mentions_series_number(make_evaluation):
    previous = PreviousWork(title="First", artist="Mika", critique="Fine.", price=1_000_000, seriesNumber=1)
    artwork = Artwork.create(image=VALID_IMAGE, evaluation=make_evaluation(), previous_work=previous)

    assert "シリーズ第2作" in build_share_text(artwork)
