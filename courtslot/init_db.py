"""Create the booking engine tables on the configured database."""

import logging

from courtslot.database import Base, engine
import courtslot.models  # noqa: F401  registers tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
