"""Unit tests for card share URLs and identifiers."""

import re

from voter_guide.lib.voter_card import CARD_TEMPLATES, build_share_url, generate_card_id


class TestBuildShareUrl:
    def test_https_for_public_host(self) -> None:
        assert build_share_url("voterguide.org", "card_1_abc") == "https://voterguide.org/card/card_1_abc"

    def test_http_for_localhost(self) -> None:
        assert build_share_url("localhost:5173", "card_1") == "http://localhost:5173/card/card_1"

    def test_http_for_loopback(self) -> None:
        assert build_share_url("127.0.0.1:8000", "card_1") == "http://127.0.0.1:8000/card/card_1"


class TestGenerateCardId:
    def test_format(self) -> None:
        assert re.fullmatch(r"card_\d+_[0-9a-f]{10}", generate_card_id())

    def test_unique(self) -> None:
        assert len({generate_card_id() for _ in range(50)}) == 50


def test_templates() -> None:
    assert CARD_TEMPLATES == ("minimal", "bold", "professional")
