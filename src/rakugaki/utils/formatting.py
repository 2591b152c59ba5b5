from __future__ import annotations

from rakugaki.domain.evaluation import Artwork

OKU = 100_000_000
MAN = 10_000

SHARE_HASHTAGS = "#RakugakiGallery #落書き美術館"


def format_price(price: int) -> str:
    """``1234567`` -> ``"¥1,234,567"``"""
    return f"¥{price:,}"


def format_price_readable(price: int) -> str:
    """Japanese reading form: ``"1.5億円"``, ``"1,500万円"`` or ``"5,000円"``."""
    if price >= OKU:
        oku = price / OKU
        if price % OKU == 0:
            return f"{price // OKU:,}億円"
        return f"{oku:.1f}億円"
    if price >= MAN:
        return f"{price // MAN:,}万円"
    return f"{price:,}円"


def build_share_text(artwork: Artwork) -> str:
    evaluation = artwork.evaluation
    lines = [
        f"私の落書きが「{evaluation.title}」({evaluation.artist})として "
        f"{format_price_readable(evaluation.price)} の評価を受けました！"
    ]
    if artwork.series_number > 1:
        lines.append(f"シリーズ第{artwork.series_number}作")
    lines.append("")
    lines.append(SHARE_HASHTAGS)
    return "\n".join(lines)
