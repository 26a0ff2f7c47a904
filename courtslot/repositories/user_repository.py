# courtslot/repositories/user_repository.py
"""Read-only user lookups."""

from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def find_player(self, player_id: str) -> Optional[User]:
        """The user if it exists and holds the PLAYER role, else None."""
        query = self.db.query(User).filter(
            User.id == player_id, User.role == RoleName.PLAYER.value
        )
        return self._execute_first(query, f"player {player_id}")
