"""SQLAlchemy models for the cashtrack record store.

Each table is one named record collection. Identifiers are opaque strings
and ``date`` columns hold fixed-width ISO-8601 UTC text (see
``cashtrack.utils.date_parser.to_iso``), so range filters can compare strings.
"""

from uuid import uuid4

from sqlalchemy import (
    Column,
    String,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from cashtrack.domain.entities import COLLECTIONS, DEPOSITS, PENDING_ITEMS

Base = declarative_base()


def new_record_id() -> str:
    """Return a fresh opaque record identifier."""
    return uuid4().hex


class Collection(Base):
    """Cash collection record model."""

    __tablename__ = "collections"

    id = Column(String, primary_key=True, default=new_record_id)
    cleaner_name = Column(String, nullable=False, index=True)
    site = Column(String, nullable=False)
    date = Column(String, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(String, nullable=True)


class PendingItem(Base):
    """Imported, unconfirmed collection model."""

    __tablename__ = "pending_items"

    id = Column(String, primary_key=True, default=new_record_id)
    cleaner_name = Column(String, nullable=False, index=True)
    site = Column(String, nullable=False)
    car_plate = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(String, nullable=False, index=True)


class Deposit(Base):
    """Bank deposit model."""

    __tablename__ = "deposits"

    id = Column(String, primary_key=True, default=new_record_id)
    cleaner_name = Column(String, nullable=False, index=True)
    site = Column(String, nullable=False)
    date = Column(String, nullable=False, index=True)
    cash_amount = Column(Numeric(12, 2), nullable=False, default=0)
    card_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False)
    deposit_slip = Column(String, nullable=True)
    auth_code = Column(String, nullable=True)


# Store collection name -> ORM model
MODELS_BY_COLLECTION = {
    COLLECTIONS: Collection,
    DEPOSITS: Deposit,
    PENDING_ITEMS: PendingItem,
}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
