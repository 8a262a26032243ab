# motorpicks/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from motorpicks.core.config import settings

engine = create_engine(settings.database_url, future=True, echo=False, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
