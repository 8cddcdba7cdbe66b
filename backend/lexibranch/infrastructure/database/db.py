from sqlalchemy.orm import Session

from lexibranch.infrastructure.database.tables.branches import BranchesTable
from lexibranch.infrastructure.database.tables.environments import EnvironmentsTable
from lexibranch.infrastructure.database.tables.projects import ProjectsTable
from lexibranch.infrastructure.database.tables.spaces import SpacesTable
from lexibranch.infrastructure.database.tables.translation_keys import (
    TranslationKeysTable,
)
from lexibranch.infrastructure.database.tables.translations import TranslationsTable


class DB:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.projects = ProjectsTable(session=session)
        self.spaces = SpacesTable(session=session)
        self.branches = BranchesTable(session=session)
        self.translation_keys = TranslationKeysTable(session=session)
        self.translations = TranslationsTable(session=session)
        self.environments = EnvironmentsTable(session=session)
