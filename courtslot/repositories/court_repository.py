# courtslot/repositories/court_repository.py
"""Read-only court lookups scoped to a facility."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.court import Court
from .base_repository import BaseRepository


class CourtRepository(BaseRepository[Court]):
    def __init__(self, db: Session):
        super().__init__(db, Court)

    def find_in_facility(self, court_id: str, facility_id: str) -> Optional[Court]:
        """The court, or None when missing or owned by another facility."""
        query = self.db.query(Court).filter(Court.id == court_id, Court.facility_id == facility_id)
        return self._execute_first(query, f"court {court_id}")

    def list_for_facility(self, facility_id: str) -> List[Court]:
        query = self.db.query(Court).filter(Court.facility_id == facility_id).order_by(Court.name)
        return self._execute_query(query)
