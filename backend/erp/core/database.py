"""SQLModel database engine and session management."""
from sqlmodel import SQLModel, create_engine, Session
from erp.core.config import settings

# Import models so SQLModel.metadata knows about all tables
import erp.models.account  # noqa: F401
import erp.models.voucher  # noqa: F401

connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    echo=False,
)


def create_db_and_tables() -> None:
    """Create all tables defined in SQLModel models."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """FastAPI dependency: yields a SQLModel session."""
    with Session(engine) as session:
        yield session
