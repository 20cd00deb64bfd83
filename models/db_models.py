"""
SQLAlchemy ORM models.

Purpose:
- Define the user table
- Use SQLAlchemy async-compatible models
- Support migrations via Alembic (alembic/versions)

Production notes:
- No uniqueness is enforced on email; add a UNIQUE index in a migration if needed
"""

from sqlalchemy import Column, Integer, String

from core.db import Base


class User(Base):
    """
    Represents a user.

    Columns:
    - id: assigned by the database on insert, immutable afterwards
    - name/email: required at creation, mutable via PATCH
    """
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)


# Columns a client may change through PATCH /users/{id}.
# Keys are the JSON field names, values the ORM attributes they write to.
MUTABLE_USER_COLUMNS = {
    "name": User.name,
    "email": User.email,
}
