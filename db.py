import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from dotenv import load_dotenv
from contextlib import contextmanager

load_dotenv()

# Local SQLite file when no database is configured
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./college_pool.db")

class Base(DeclarativeBase):
    pass

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, future=True, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(bind=None):
    """Create every table registered on Base (reference dataset included)."""
    import college_pool.models  # noqa: F401  registers the ORM tables
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
