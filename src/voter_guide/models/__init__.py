"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from voter_guide.models.analytics_event import AnalyticsEvent
from voter_guide.models.ballot import Ballot
from voter_guide.models.ballot_measure import BallotMeasure
from voter_guide.models.decision import VoterDecision
from voter_guide.models.election_event import ElectionEvent, EventSubscription
from voter_guide.models.location import District, Zipcode, ZipcodeDistrict
from voter_guide.models.race import Candidate, CandidateEndorsement, Race, RaceCandidate
from voter_guide.models.user import User
from voter_guide.models.voter_card import FinalizedVoterCard

__all__ = [
    "AnalyticsEvent",
    "Ballot",
    "BallotMeasure",
    "Candidate",
    "CandidateEndorsement",
    "District",
    "ElectionEvent",
    "EventSubscription",
    "FinalizedVoterCard",
    "Race",
    "RaceCandidate",
    "User",
    "VoterDecision",
    "Zipcode",
    "ZipcodeDistrict",
]
