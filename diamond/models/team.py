from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from diamond.database import Base
from diamond.models.player import new_id

# Players counted towards the team rating
LINEUP_SIZE = 9


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100))
    city: Mapped[str] = mapped_column(String(50), default="")
    stadium: Mapped[str] = mapped_column(String(100), default="")
    home_advantage: Mapped[int] = mapped_column(Integer, default=0)

    # Branding
    primary_color: Mapped[str] = mapped_column(String(7), default="#3b82f6")  # Hex color
    secondary_color: Mapped[str] = mapped_column(String(7), default="#22c55e")
    accent_color: Mapped[str] = mapped_column(String(7), default="#f59e0b")
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # Opaque logo reference

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Roster, in batting order
    players: Mapped[list["Player"]] = relationship(
        "Player",
        back_populates="team",
        order_by="Player.lineup_order",
        cascade="all, delete-orphan",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", new_id())
        kwargs.setdefault("city", "")
        kwargs.setdefault("stadium", "")
        kwargs.setdefault("home_advantage", 0)
        kwargs.setdefault("primary_color", "#3b82f6")
        kwargs.setdefault("secondary_color", "#22c55e")
        kwargs.setdefault("accent_color", "#f59e0b")
        now = datetime.utcnow()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        super().__init__(**kwargs)

    @property
    def colors(self) -> list[str]:
        return [self.primary_color, self.secondary_color, self.accent_color]

    @property
    def display_name(self) -> str:
        return f"{self.city} {self.name}" if self.city else self.name

    @property
    def squad_size(self) -> int:
        return len(self.players)

    @property
    def pitcher_count(self) -> int:
        return sum(1 for p in self.players if p.pitches)

    @property
    def overall_rating(self) -> int:
        """Average OVR of the top nine rated players"""
        if not self.players:
            return 0
        top = sorted((p.overall_rating for p in self.players), reverse=True)[:LINEUP_SIZE]
        return int(round(sum(top) / len(top)))

    def renumber_lineup(self) -> None:
        """Make lineup_order follow the current list order"""
        for index, player in enumerate(self.players):
            player.lineup_order = index

    def __repr__(self):
        return f"<Team {self.display_name} ({self.squad_size} players)>"
