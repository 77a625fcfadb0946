from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config.settings import settings

DATABASE_URL = settings.DATABASE['url']

# SQLite needs check_same_thread off for FastAPI's threadpool; hosted Postgres wants SSL
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
elif DATABASE_URL.startswith("postgres"):
    connect_args = {"sslmode": "require"}
else:
    connect_args = {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """Create tables for the report store"""
    from app.models import storage_entry  # noqa: F401  (registers the table)
    Base.metadata.create_all(bind=engine)


# Imported wherever a DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
