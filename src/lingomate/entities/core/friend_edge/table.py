"""Friend edge database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field

from src.lingomate.entities.core._base import EntityTable


class FriendEdgeTable(EntityTable, table=True):
    """Database persistence model for friend edges.

    ``user_low``/``user_high`` hold the pair in canonical order; the unique
    constraint on them is what makes a concurrent duplicate send fail.
    """

    __tablename__ = "friend_edges"
    __table_args__ = (
        UniqueConstraint("user_low", "user_high", name="uq_friend_edge_pair"),
        CheckConstraint("user_low < user_high", name="ck_friend_edge_ordered_pair"),
        CheckConstraint(
            "status IN ('pending', 'accepted')", name="ck_friend_edge_status"
        ),
    )

    requester_id: str = Field(foreign_key="users.id", index=True)
    recipient_id: str = Field(foreign_key="users.id", index=True)
    user_low: str = Field(index=True)
    user_high: str = Field(index=True)
    status: str = Field(default="pending", max_length=16, index=True)
    accepted_at: datetime | None = Field(
        default=None, sa_type=sa.DateTime(timezone=True), nullable=True
    )
