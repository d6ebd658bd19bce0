from app.config import get_settings
from app.infrastructure.db.engine import build_engine, build_sessionmaker

settings = get_settings()

# Sin DATABASE_URL se usa SQLite en memoria (dev/test)
engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)
