from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def init_database(database_url: str) -> tuple[Engine, sessionmaker]:
    # SQLite needs check_same_thread, Postgres must NOT have it
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}

    engine = create_engine(database_url, connect_args=connect_args)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return engine, session_factory


def create_tables(engine: Engine) -> None:
    # register models on Base.metadata
    from userapi.models import user  # noqa: F401

    Base.metadata.create_all(bind=engine)
