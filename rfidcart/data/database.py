# rfidcart/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from rfidcart.utils.settings import DATABASE_URL


def build_engine(url: str):
    #sqlite (testy, dev) - polaczenia sa wspoldzielone miedzy watkami
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def init_db(bind=None):
    #import modeli zeby zarejestrowaly sie w Base.metadata przed create_all
    import rfidcart.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
