"""Location service -- resolve a ZIP code to a supported pilot location."""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.lib.location import UnsupportedStateError, is_supported_state, validate_zipcode
from voter_guide.models.location import Zipcode, ZipcodeDistrict


class ZipCodeNotFoundError(LookupError):
    """Raised when a well-formed ZIP code is not in the reference data."""

    def __init__(self, zipcode: str) -> None:
        self.zipcode = zipcode
        super().__init__("ZIP code not found")


async def get_zipcode(session: AsyncSession, zipcode: str) -> Zipcode | None:
    """Look up a ZIP code row without pilot checks."""
    result = await session.execute(select(Zipcode).where(Zipcode.zipcode == zipcode))
    return result.scalar_one_or_none()


async def resolve(session: AsyncSession, zipcode: str) -> Zipcode:
    """Resolve a ZIP code to its location inside the pilot program.

    The format check runs before any query.

    Args:
        session: Database session.
        zipcode: 5-digit ZIP code.

    Returns:
        The Zipcode row.

    Raises:
        InvalidZipCodeError: If the ZIP code is malformed.
        ZipCodeNotFoundError: If the ZIP code is unknown.
        UnsupportedStateError: If the ZIP code is outside the pilot states.
    """
    validate_zipcode(zipcode)
    location = await get_zipcode(session, zipcode)
    if location is None:
        logger.info(f"ZIP code {zipcode} not found")
        raise ZipCodeNotFoundError(zipcode)
    if not is_supported_state(location.state):
        logger.info(f"ZIP code {zipcode} resolves to unsupported state {location.state}")
        raise UnsupportedStateError(location.state)
    return location


async def list_district_ids(session: AsyncSession, zipcode: str) -> list[str]:
    """Return the district ids linked to a ZIP code, in link order."""
    result = await session.execute(
        select(ZipcodeDistrict.district_id).where(ZipcodeDistrict.zipcode == zipcode).order_by(ZipcodeDistrict.id)
    )
    return list(result.scalars().all())
