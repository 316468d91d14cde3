"""Location reference data: ZIP codes, electoral districts, and their links.

A ZIP code may span several districts and a district covers many ZIP codes,
so the two are joined through ``zipcode_districts``.
"""

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base


class Zipcode(Base):
    """A 5-digit ZIP code resolved to state, county, and city.

    Attributes:
        zipcode: The 5-digit ZIP code (primary key).
        state: Two-letter state code.
        county: County name without the "County" suffix.
        city: Primary city name.
    """

    __tablename__ = "zipcodes"

    zipcode: Mapped[str] = mapped_column(String(5), primary_key=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    county: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_zipcodes_state", "state"),)


class District(Base):
    """An electoral district (congressional, state senate, county, ...)."""

    __tablename__ = "districts"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    district_type: Mapped[str] = mapped_column(String(50), nullable=False)
    number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    __table_args__ = (Index("ix_districts_state", "state"),)


class ZipcodeDistrict(Base):
    """Many-to-many link between a ZIP code and a district."""

    __tablename__ = "zipcode_districts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    zipcode: Mapped[str] = mapped_column(String(5), ForeignKey("zipcodes.zipcode"), nullable=False)
    district_id: Mapped[str] = mapped_column(String(100), ForeignKey("districts.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("zipcode", "district_id", name="uq_zipcode_district"),
        Index("ix_zipcode_districts_zipcode", "zipcode"),
    )
