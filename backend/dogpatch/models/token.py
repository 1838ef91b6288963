"""
DogPatch Backend - Token SQLAlchemy Model
==========================================

What:  Opaque bearer tokens issued on login. A token maps to exactly one user
       and never expires; the bearer dependency resolves it back to a User.
"""

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dogpatch.database import Base


class Token(Base):
    __tablename__ = "tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<Token(id={self.id}, user_id={self.user_id})>"
