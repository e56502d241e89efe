from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "BACKGROUND",
    "BLACK",
    "Color",
    "Controls",
    "Enemy",
    "Player",
    "Position",
    "Rect",
    "RED",
    "WHITE",
    "World",
    "WorldConfig",
]


class Position(BaseModel):
    """2D coordinates of an entity. The origin is the window centre."""

    x: float = 0.0
    y: float = 0.0

    def distance_to(self, other: Position) -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5


class Color(BaseModel):
    red: float = Field(ge=0, le=255)
    green: float = Field(ge=0, le=255)
    blue: float = Field(ge=0, le=255)

    def as_unit_rgb(self) -> tuple[float, float, float]:
        """Channels scaled to 0..1 (the form matplotlib expects)."""
        return (self.red / 255.0, self.green / 255.0, self.blue / 255.0)


WHITE = Color(red=255, green=255, blue=255)
RED = Color(red=255, green=0, blue=0)
BLACK = Color(red=0, green=0, blue=0)
BACKGROUND = Color(red=47, green=79, blue=79)  # darkslategray


class Rect(BaseModel):
    """Axis-aligned window rectangle centred on the origin."""

    left: float
    right: float
    bottom: float
    top: float


class WorldConfig(BaseModel):
    """Dimensions of the arena and the rules of the world."""

    width: float = Field(default=512.0, gt=0)
    height: float = Field(default=512.0, gt=0)
    num_enemies: int = Field(default=500, ge=0)
    player_radius: float = Field(default=5.0, gt=0)
    enemy_radius: float = Field(default=5.0, gt=0)
    spawn_fraction: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Fraction of the half-window enemies may spawn in",
    )
    spawn_clearance: float = Field(
        default=2.0,
        ge=0,
        description="Enemies never spawn within this many player radii on either axis",
    )
    enemy_jitter: float = Field(
        default=1.0, ge=0, description="Max random-walk step per axis per tick"
    )

    @model_validator(mode="after")
    def _validate_spawn_area(self) -> WorldConfig:
        half = min(self.width, self.height) / 2 * self.spawn_fraction
        clearance = self.player_radius * self.spawn_clearance
        if clearance >= half:
            raise ValueError(
                f"spawn clearance {clearance} leaves no room inside half-size {half}"
            )
        return self

    @property
    def rect(self) -> Rect:
        return Rect(
            left=-self.width / 2,
            right=self.width / 2,
            bottom=-self.height / 2,
            top=self.height / 2,
        )


class Player(BaseModel):
    """Plays, learns, and evolves."""

    position: Position = Field(default_factory=Position)
    radius: float = 5.0
    color: Color = WHITE
    alive: bool = True
    rotation: float = 0.0
    speed: float = 0.0


class Enemy(BaseModel):
    """Obstacle to the player."""

    position: Position = Field(default_factory=Position)
    radius: float = 5.0
    color: Color = RED
    alive: bool = True


class World(BaseModel):
    """Keeps track of all entities: the player and their enemies."""

    player: Player
    enemies: list[Enemy] = Field(default_factory=list)
    config: WorldConfig = Field(default_factory=WorldConfig)
    tick: int = 0


class Controls(BaseModel):
    """External input for one tick.

    ``target`` plays the role of the mouse cursor the player follows and
    ``restart`` of the click that rebuilds a finished world.
    """

    target: Position | None = None
    restart: bool = False
