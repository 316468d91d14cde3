"""Unit tests for voter card line-item composition."""

from voter_guide.lib.voter_card import CardLineItem, compose_line_items, format_location

RACES = [
    {
        "id": "race-1",
        "office": "U.S. House",
        "candidates": [
            {"id": "cand-a", "firstName": "Maria", "lastName": "Rivera", "party": "Democratic", "position": "Housing."},
            {"id": "cand-b", "firstName": "David", "lastName": "Chen"},
        ],
    },
    {"id": "race-2", "office": "State Senate", "candidates": []},
]

MEASURES = [
    {"id": "m-1", "measureNumber": "Prop 1", "title": "Equal protection", "shortTitle": "Equal Rights"},
    {"id": "m-2", "title": "Transit bond"},
]


class TestComposeLineItems:
    """Tests for compose_line_items()."""

    def test_candidates_then_measures(self) -> None:
        items = compose_line_items(
            RACES,
            MEASURES,
            measure_decisions={"m-2": {"decision": "no"}, "m-1": {"decision": "yes", "note": "Easy call"}},
            candidate_selections={"race-1": "cand-a"},
        )
        assert [(i.type, i.title, i.decision) for i in items] == [
            ("candidate", "U.S. House: Maria Rivera", "Selected"),
            ("measure", "Prop 1", "Yes"),
            ("measure", "Transit bond", "No"),
        ]
        assert items[0].description == "Democratic candidate. Housing."
        assert items[1].note == "Easy call"
        assert items[1].description == "Equal Rights"

    def test_independent_default_description(self) -> None:
        items = compose_line_items(
            RACES, [], measure_decisions={}, candidate_selections={"race-1": "cand-b"}
        )
        assert items[0].description == "Independent candidate. David Chen is running for U.S. House"

    def test_unknown_references_skipped(self) -> None:
        items = compose_line_items(
            RACES,
            MEASURES,
            measure_decisions={"m-missing": {"decision": "yes"}},
            candidate_selections={"race-1": "cand-missing", "race-missing": "cand-a"},
        )
        assert items == []

    def test_hidden_titles_and_notes(self) -> None:
        items = compose_line_items(
            RACES,
            MEASURES,
            measure_decisions={"m-1": {"decision": "undecided"}},
            candidate_selections={"race-1": "cand-a"},
            notes={"race-1": "Met her at a town hall"},
            hidden_titles=["Prop 1"],
        )
        assert items[0].note == "Met her at a town hall"
        assert items[0].hidden is False
        assert items[1].hidden is True
        assert items[1].decision == "Undecided"

    def test_show_notes_false_drops_notes(self) -> None:
        items = compose_line_items(
            RACES,
            MEASURES,
            measure_decisions={"m-1": {"decision": "yes", "note": "n"}},
            candidate_selections={"race-1": "cand-a"},
            notes={"race-1": "n"},
            show_notes=False,
        )
        assert all(i.note is None for i in items)


class TestCardLineItem:
    def test_to_dict_omits_empty_optionals(self) -> None:
        item = CardLineItem(type="measure", title="Prop 1", decision="Yes")
        assert item.to_dict() == {"type": "measure", "title": "Prop 1", "decision": "Yes", "hidden": False}

    def test_to_dict_includes_note_and_description(self) -> None:
        item = CardLineItem(type="measure", title="Prop 1", decision="Yes", note="n", description="d")
        assert item.to_dict()["note"] == "n"
        assert item.to_dict()["description"] == "d"


class TestFormatLocation:
    def test_with_county(self) -> None:
        assert format_location("New York", "NY") == "New York County, NY"

    def test_without_county(self) -> None:
        assert format_location(None, "TX") == "TX"
