"""
Record models mirroring the issue tracker's JSON payloads.

Records are frozen once parsed. Anything the board derives from them (vote
count, category, displayable text) is computed from the stored fields and
never written back locally.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.vote_codec import parse_vote_count, strip_sections

BUG_LABEL = "bug"
FEATURE_REQUEST_LABEL = "feature-request"
USER_SUBMITTED_LABEL = "user-submitted"


class RecordFilter(str, Enum):
    """Which records a listing should return."""
    ALL = "all"
    BUGS = "bugs"
    FEATURES = "features"


class Category(str, Enum):
    """Kind of feedback; the value is the label applied on creation."""
    BUG = BUG_LABEL
    FEATURE_REQUEST = FEATURE_REQUEST_LABEL


class ReactionKind(str, Enum):
    """Reaction contents accepted by the tracker."""
    PLUS_ONE = "+1"
    MINUS_ONE = "-1"
    LAUGH = "laugh"
    CONFUSED = "confused"
    HEART = "heart"
    HOORAY = "hooray"
    ROCKET = "rocket"
    EYES = "eyes"


class Label(BaseModel):
    """Tracker label."""
    model_config = ConfigDict(frozen=True)

    name: str
    color: Optional[str] = None


class User(BaseModel):
    """Author identity, display only."""
    model_config = ConfigDict(frozen=True)

    login: str
    id: int


class Reactions(BaseModel):
    """Native reaction counters reported by the tracker."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    plus_one: int = Field(default=0, alias="+1")
    minus_one: int = Field(default=0, alias="-1")
    laugh: int = 0
    hooray: int = 0
    confused: int = 0
    heart: int = 0


class Record(BaseModel):
    """A single feedback item stored as a tracker issue."""
    model_config = ConfigDict(frozen=True)

    id: int
    number: int
    title: str
    body: Optional[str] = None
    state: str = "open"
    labels: List[Label] = Field(default_factory=list)
    created_at: str
    updated_at: str
    user: User
    reactions: Optional[Reactions] = None

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]

    @property
    def is_bug(self) -> bool:
        return BUG_LABEL in self.label_names

    @property
    def is_feature_request(self) -> bool:
        return FEATURE_REQUEST_LABEL in self.label_names

    @property
    def vote_count(self) -> int:
        return parse_vote_count(self.body)

    @property
    def displayable_body(self) -> str:
        return strip_sections(self.body)

    @property
    def reaction_upvotes(self) -> int:
        if self.reactions is None:
            return 0
        return self.reactions.plus_one


class Comment(BaseModel):
    """Comment attached to a record."""
    model_config = ConfigDict(frozen=True)

    id: int
    body: Optional[str] = None
    user: User
    created_at: str
    updated_at: str
