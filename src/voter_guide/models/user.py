"""User model for registered voters with a public profile."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """A registered user whose public voter cards are listed under their username."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(5), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    county: Mapped[str | None] = mapped_column(String(100), nullable=True)
