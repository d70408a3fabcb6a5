# app/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

engine = create_engine(DATABASE_URL, pool_pre_ping=True)

#expire_on_commit=False - serwisy zwracaja dane po commicie
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    #import modeli zeby zarejestrowaly sie w Base.metadata
    import app.data.models  # noqa: F401

    target = bind or engine
    logger.info(f"Tworzenie tabel: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=target)
