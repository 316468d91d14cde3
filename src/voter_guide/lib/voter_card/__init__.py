"""Voter card library — share URLs, card ids, and line-item composition."""

from voter_guide.lib.voter_card.composer import CardLineItem, compose_line_items, format_location
from voter_guide.lib.voter_card.share import CARD_TEMPLATES, build_share_url, generate_card_id

__all__ = [
    "CARD_TEMPLATES",
    "CardLineItem",
    "build_share_url",
    "compose_line_items",
    "format_location",
    "generate_card_id",
]
