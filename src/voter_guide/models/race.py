"""Race, candidate, and endorsement ORM models."""

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base


class Race(Base):
    """A contested office or position up for election in one district."""

    __tablename__ = "races"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    election_year: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    race_type: Mapped[str] = mapped_column(String(50), nullable=False)
    office: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    primary_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    district_id: Mapped[str | None] = mapped_column(String(100), ForeignKey("districts.id"), nullable=True)

    __table_args__ = (
        Index("ix_races_district_id", "district_id"),
        Index("ix_races_state", "state"),
    )


class Candidate(Base):
    """A person running for office; may appear in several races."""

    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    party: Mapped[str | None] = mapped_column(String(50), nullable=True)
    incumbent_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class RaceCandidate(Base):
    """Join row pairing a candidate with a race, with primary results."""

    __tablename__ = "race_candidates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[str] = mapped_column(String(100), ForeignKey("races.id", ondelete="CASCADE"), nullable=False)
    candidate_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
    )
    primary_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    primary_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_won_primary: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __table_args__ = (
        UniqueConstraint("race_id", "candidate_id", name="uq_race_candidate"),
        Index("ix_race_candidates_race_id", "race_id"),
    )


class CandidateEndorsement(Base):
    """An endorsement of a candidate by an organization."""

    __tablename__ = "candidate_endorsements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    candidate_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
    )
    organization: Mapped[str] = mapped_column(String(200), nullable=False)
    endorsement_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_candidate_endorsements_candidate_id", "candidate_id"),)
