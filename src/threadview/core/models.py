"""Data types for the threaded comment service.

Comment nodes are immutable so a fetched forest can be filtered repeatedly
without the filter disturbing the copy a caller still holds.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

SortKey = Literal["created_at_desc", "created_at_asc"]
ViewMode = Literal["paged", "thread", "search"]

DEFAULT_SORT: SortKey = "created_at_desc"
SORT_KEYS: tuple[SortKey, ...] = ("created_at_desc", "created_at_asc")
SORT_LABELS: dict[str, str] = {
    "created_at_desc": "Newest first",
    "created_at_asc": "Oldest first",
}


class CommentNode(BaseModel):
    """A single comment and the replies fetched beneath it.

    The service may emit either snake_case keys or Go-style exported names
    (``ID``, ``ParentID``, ``Children`` ...); both decode to the same node.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(validation_alias=AliasChoices("id", "ID"))
    parent_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("parent_id", "ParentID")
    )
    author: str = Field(validation_alias=AliasChoices("author", "Author"))
    content: str = Field(validation_alias=AliasChoices("content", "Content"))
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "CreatedAt")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updated_at", "UpdatedAt")
    )
    children: List["CommentNode"] = Field(
        default_factory=list, validation_alias=AliasChoices("children", "Children")
    )

    @field_validator("children", mode="before")
    @classmethod
    def default_children(cls, v):
        """Normalize a null children list to an empty one."""
        return v if v is not None else []

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring test against author and content.

        Args:
            needle: Already lowercased search text
        """
        return needle in self.author.lower() or needle in self.content.lower()


Forest = List[CommentNode]


class NewComment(BaseModel):
    """Request body for creating a comment or a reply."""

    parent_id: Optional[int] = None
    author: str
    content: str

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    def to_payload(self) -> dict:
        """Serialize to the wire body, keeping an explicit null parent."""
        return {"parent_id": self.parent_id, "author": self.author, "content": self.content}
