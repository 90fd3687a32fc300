from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from stockroom.config import DATABASE_URL, DEBUG

if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, echo=DEBUG)
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True, echo=DEBUG)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
