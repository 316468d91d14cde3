"""BallotMeasure model — a state-wide proposition voters approve or reject."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, JSONType


class BallotMeasure(Base):
    """A ballot measure scoped to a state.

    Attributes:
        measure_number: Display number (e.g. "Prop 1").
        short_title: Optional abbreviated title used on voter cards.
        pro_arguments: Ordered list of arguments in favour.
        con_arguments: Ordered list of arguments against.
    """

    __tablename__ = "ballot_measures"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    election_year: Mapped[int] = mapped_column(Integer, nullable=False)
    measure_number: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    short_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fiscal_impact: Mapped[str | None] = mapped_column(Text, nullable=True)
    pro_arguments: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    con_arguments: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)

    __table_args__ = (Index("ix_ballot_measures_state", "state"),)
