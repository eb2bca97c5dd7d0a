from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine

# Registers the bike table on SQLModel.metadata.
from bikehub.models import bike_db  # noqa: F401


def build_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Handlers run in FastAPI's threadpool.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, connect_args=connect_args)

def create_db_and_tables(engine: Engine):
    SQLModel.metadata.create_all(engine)

def get_session(engine: Engine) -> Session:
    return Session(engine)
