from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from league_backend.core.config import settings


def build_engine(database_url: str):
    """Create an engine; SQLite needs cross-thread access for FastAPI's threadpool."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        pool_pre_ping=True,   # tests connections before using them
        connect_args=connect_args,
    )


engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def import_models():
    # Import all models here so they register on Base.metadata
    from league_backend.leagues.models.league_model import League
    from league_backend.teams.models.team_model import Team
    from league_backend.fixtures.models.fixture_model import Fixture
    from league_backend.results.models.result_model import Result
    from league_backend.standings.models.standings_model import Standing
    from league_backend.audit.models.audit_model import AuditLog
    from league_backend.reports.models.report_model import Report

# Function to initialize the database
def init_db(bind=None):
    import_models()

    # Use context manager to ensure connection is released
    with (bind or engine).begin() as conn:
        Base.metadata.create_all(bind=conn)
