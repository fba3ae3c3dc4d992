"""User ORM: registered collectors.

Invariants:
    - email is unique and always stored lower-case (case-insensitive identity)
    - password_hash holds a passlib hash string, never the raw password
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    street_address: Mapped[str] = mapped_column(String(100), nullable=False)
