from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from jobquest.core import config
DATABASE_URL = config.DATABASE_URL

# SQLite needs cross-thread access because sync routes run in the threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
