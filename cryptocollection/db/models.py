from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, Index

from cryptocollection.db.session import Base
from cryptocollection.utils.time import utcnow


class FavoriteCoin(Base):
    """A coin the user bookmarked. Favorite state is the row's existence."""

    __tablename__ = "favorite_coins"
    __table_args__ = (
        UniqueConstraint("coin_id", name="uq_favorite_coins_coin_id"),
        Index("ix_favorite_coins_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    coin_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    symbol = Column(String, nullable=False)
    market_cap_rank = Column(Integer, nullable=True)
    thumb = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
