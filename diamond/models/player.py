from typing import Optional
from uuid import uuid4
from sqlalchemy import String, Integer, ForeignKey, Enum, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
import enum
from diamond.database import Base


def new_id() -> str:
    return str(uuid4())


class Position(enum.Enum):
    PITCHER = "P"
    CATCHER = "C"
    FIRST_BASE = "1B"
    SECOND_BASE = "2B"
    THIRD_BASE = "3B"
    SHORTSTOP = "SS"
    LEFT_FIELD = "LF"
    CENTER_FIELD = "CF"
    RIGHT_FIELD = "RF"
    DESIGNATED_HITTER = "DH"
    UTILITY = "UT"


# Rating attributes, all on a 0-100 scale
ATTRIBUTES = ("hit", "power", "speed", "defense", "arm", "pitching")
DEFAULT_RATING = 50


def clamp_rating(value) -> int:
    """Coerce a rating to an int inside [0, 100]; missing values become neutral"""
    if value is None:
        return DEFAULT_RATING
    return max(0, min(100, int(round(float(value)))))


class Player(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100))
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # Opaque image reference
    position: Mapped[Position] = mapped_column(Enum(Position), default=Position.DESIGNATED_HITTER)
    is_pitcher: Mapped[bool] = mapped_column(Boolean, default=False)
    is_star: Mapped[bool] = mapped_column(Boolean, default=False)

    # Ratings (0-100 scale)
    hit: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)       # Contact
    power: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)     # Extra-base pop
    speed: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)     # Triples, steals
    defense: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)   # Glove work
    arm: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)       # Throwing out runners
    pitching: Mapped[int] = mapped_column(Integer, default=0)

    # Team relationship; lineup_order is the batting order slot
    team_id: Mapped[Optional[str]] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), nullable=True)
    lineup_order: Mapped[int] = mapped_column(Integer, default=0)
    team: Mapped["Team"] = relationship("Team", back_populates="players")

    def __init__(self, **kwargs):
        kwargs.setdefault("id", new_id())
        kwargs.setdefault("position", Position.DESIGNATED_HITTER)
        kwargs.setdefault("is_pitcher", False)
        kwargs.setdefault("is_star", False)
        kwargs.setdefault("lineup_order", 0)
        for attr in ATTRIBUTES:
            kwargs.setdefault(attr, 0 if attr == "pitching" else DEFAULT_RATING)
        super().__init__(**kwargs)

    @validates(*ATTRIBUTES)
    def _clamp_attribute(self, key, value):
        return clamp_rating(value)

    @property
    def pitches(self) -> bool:
        """Flagged pitchers and anyone slotted at P both take the mound"""
        return bool(self.is_pitcher) or self.position == Position.PITCHER

    @property
    def overall_rating(self) -> int:
        """Calculate overall rating; pitchers are rated on PIT instead of the bat"""
        bat = self.hit * 0.45 + self.power * 0.35 + self.speed * 0.20
        glove = self.defense * 0.65 + self.arm * 0.35
        role = self.pitching if self.pitches else bat
        return int(round(role * 0.62 + glove * 0.28 + self.pitching * 0.10))

    def ratings(self) -> dict:
        return {attr: getattr(self, attr) for attr in ATTRIBUTES}

    def __repr__(self):
        return f"<Player {self.name} ({self.position.value}) - OVR: {self.overall_rating}>"
