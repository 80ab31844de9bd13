"""SQLAlchemy model for claim categories."""
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base


class Category(Base):
    """Topic grouping used for browsing and SEO metadata."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
