"""Turn recorded decisions into ordered voter card line items.

Works on the camelCase ballot payload (as cached on ``Ballot.races`` /
``Ballot.measures``) so it can run against either a freshly assembled or a
stored ballot.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class CardLineItem:
    """A single display-ready voter card entry."""

    type: str
    title: str
    decision: str
    hidden: bool = False
    note: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "decision": self.decision,
            "hidden": self.hidden,
        }
        if self.note:
            data["note"] = self.note
        if self.description:
            data["description"] = self.description
        return data


def _candidate_name(candidate: Mapping[str, Any]) -> str:
    return f"{candidate.get('firstName', '')} {candidate.get('lastName', '')}".strip()


def _candidate_description(candidate: Mapping[str, Any], office: str) -> str:
    name = _candidate_name(candidate)
    party = candidate.get("party") or "Independent"
    position = candidate.get("position") or f"{name} is running for {office}"
    return f"{party} candidate. {position}".strip()


def compose_line_items(
    races: Iterable[Mapping[str, Any]],
    measures: Iterable[Mapping[str, Any]],
    *,
    measure_decisions: Mapping[str, Mapping[str, Any]],
    candidate_selections: Mapping[str, str],
    notes: Mapping[str, str] | None = None,
    hidden_titles: Iterable[str] = (),
    show_notes: bool = True,
) -> list[CardLineItem]:
    """Compose voter card line items from a ballot and a visitor's decisions.

    Candidate selections come first in race order, then measure decisions in
    ballot order.  Selections pointing at races or candidates that are not on
    the ballot are skipped, as are decisions for unknown measures.

    Args:
        races: Ballot races, each with a ``candidates`` list.
        measures: Ballot measures.
        measure_decisions: measureId -> {"decision", "note"?}.
        candidate_selections: raceId -> candidateId.
        notes: Free-text notes keyed by race id.
        hidden_titles: Titles the visitor chose to hide on the card.
        show_notes: When False, notes are dropped from every item.

    Returns:
        Ordered list of CardLineItem.
    """
    notes = notes or {}
    hidden = set(hidden_titles)
    items: list[CardLineItem] = []

    for race in races:
        selected_id = candidate_selections.get(race["id"])
        if not selected_id:
            continue
        candidate = next((c for c in race.get("candidates") or [] if c.get("id") == selected_id), None)
        if candidate is None:
            continue
        office = race.get("office") or ""
        title = f"{office}: {_candidate_name(candidate)}"
        items.append(
            CardLineItem(
                type="candidate",
                title=title,
                decision="Selected",
                hidden=title in hidden,
                note=notes.get(race["id"]) if show_notes else None,
                description=_candidate_description(candidate, office),
            )
        )

    for measure in measures:
        decision = measure_decisions.get(measure["id"])
        if not decision:
            continue
        title = measure.get("measureNumber") or measure.get("title") or measure["id"]
        items.append(
            CardLineItem(
                type="measure",
                title=title,
                decision=str(decision.get("decision", "")).capitalize(),
                hidden=title in hidden,
                note=decision.get("note") if show_notes else None,
                description=measure.get("shortTitle") or measure.get("title"),
            )
        )

    return items


def format_location(county: str | None, state: str) -> str:
    """Render the card location line (``"New York County, NY"``)."""
    if county:
        return f"{county} County, {state}"
    return state
