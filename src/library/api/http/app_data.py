from dataclasses import dataclass

from src.library.core.services.database.db_session import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
