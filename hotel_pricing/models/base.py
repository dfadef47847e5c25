from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from hotel_pricing.config import SCHEMA


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The tables are owned by the hotel's property database; these models only
    describe the columns the pricing engine reads and writes.
    """

    metadata = MetaData(schema=SCHEMA)
