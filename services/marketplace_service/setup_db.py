import logging
import sys

from .database import Base, SessionLocal, engine
from .seed import seed_if_empty

logger = logging.getLogger(__name__)


def setup_database() -> bool:
    logger.info("Initializing database...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully.")

    db = SessionLocal()
    try:
        return seed_if_empty(db)
    finally:
        db.close()


def main():
    logging.basicConfig(level=logging.INFO)
    try:
        setup_database()
    except Exception:
        logger.exception("Error setting up database")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
