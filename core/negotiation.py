# =============================================================================
# core/negotiation.py - Accept Header Negotiation
# =============================================================================
# Picks the best media type the server can offer for a request's Accept
# header. Offers are ranked by the quality the client gave them, then by how
# specific the matching Accept entry is, then by the entry's position in the
# header, then by the order of the offers.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class AcceptEntry:
    type: str
    subtype: str
    quality: float
    index: int

    def specificity(self, media_type: str) -> int:
        """-1 if this entry does not match ``media_type``."""
        offer_type, _, offer_subtype = media_type.partition("/")
        score = 0
        if self.type == offer_type:
            score |= 4
        elif self.type != "*":
            return -1
        if self.subtype == offer_subtype:
            score |= 2
        elif self.subtype != "*":
            return -1
        return score


def parse_accept(header: str) -> list[AcceptEntry]:
    entries = []
    for index, part in enumerate(header.split(",")):
        media, *params = [piece.strip() for piece in part.split(";")]
        if not media:
            continue
        if "/" in media:
            main, _, sub = media.partition("/")
        else:
            main, sub = media, "*"
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        entries.append(AcceptEntry(main.lower(), sub.lower(), quality, index))
    return entries


def preferred_type(accept: str | None, offers: Sequence[str]) -> str | None:
    """
    Choose the offer the client prefers.

    Args:
        accept: Raw Accept header (None or empty means anything goes)
        offers: Full media types in server preference order

    Returns:
        The chosen media type, or None when nothing is acceptable

    Example:
        preferred_type("application/json", ["text/html", "application/json"])
        # "application/json"
    """
    if not offers:
        return None
    if not accept or not accept.strip():
        return offers[0]

    entries = parse_accept(accept)
    ranked = []
    for offer_index, offer in enumerate(offers):
        best = None
        for entry in entries:
            score = entry.specificity(offer.lower())
            if score < 0:
                continue
            key = (score, entry.quality, -entry.index)
            if best is None or key > best[0]:
                best = (key, entry)
        if best is None or best[1].quality <= 0:
            continue
        specificity, quality, neg_index = best[0]
        ranked.append(((-quality, -specificity, -neg_index, offer_index), offer))

    if not ranked:
        return None
    ranked.sort()
    return ranked[0][1]
