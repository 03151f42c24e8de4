"""Create the database schema for the configured database."""

from src.lingomate.core.services.database.db_session import DbSessionService
from src.lingomate.runtime.context import get_config


def init_db() -> None:
    service = DbSessionService(get_config().database)
    try:
        service.create_all()
    finally:
        service.dispose()


if __name__ == "__main__":
    init_db()
