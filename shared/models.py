"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class UserRole(str, Enum):
    """Account roles recognised by the platform."""

    USER = "user"
    CREATOR = "creator"
    BUSINESS = "business"
    ADMIN = "admin"


class User(BaseModel):
    """
    The authenticated principal as returned by the backend.

    The session manager owns the current instance; the achievements module
    reads its activity collections. Backend payloads use camelCase and Mongo
    style ``_id``, both of which are accepted. Fields the client does not
    model are preserved so that a persisted user round-trips unchanged.
    """

    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        description="User ID",
    )
    username: Optional[str] = Field(None, description="Handle")
    email: Optional[str] = Field(None, description="Email address, as stored by the backend")
    role: UserRole = Field(default=UserRole.USER, description="Account role")

    is_verified: bool = Field(default=False, alias="isVerified")
    is_monetized: bool = Field(default=False, alias="isMonetized")
    monetization_enabled: bool = Field(default=False, alias="monetizationEnabled")

    # Activity collections (entries are opaque ids or embedded documents)
    posts: list[Any] = Field(default_factory=list)
    subscriber: list[Any] = Field(default_factory=list)
    subscribed: list[Any] = Field(default_factory=list)
    comments: list[Any] = Field(default_factory=list)
    shared: list[Any] = Field(default_factory=list)
    liked: list[Any] = Field(default_factory=list)
    watched: list[Any] = Field(default_factory=list)

    days_active: int = Field(default=0, alias="daysActive")
    joined_early: bool = Field(default=False, alias="joinedEarly")

    model_config = {
        "frozen": True,  # Only the session manager replaces the user
        "extra": "allow",
        "populate_by_name": True,
    }

    @field_validator(
        "posts", "subscriber", "subscribed", "comments", "shared", "liked", "watched",
        mode="before",
    )
    @classmethod
    def none_to_empty_list(cls, value: Any) -> Any:
        """Backend sends null for collections that were never populated."""
        return [] if value is None else value

    @field_validator("days_active", mode="before")
    @classmethod
    def none_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("joined_early", mode="before")
    @classmethod
    def none_to_false(cls, value: Any) -> Any:
        return False if value is None else value

    def to_storage(self) -> dict[str, Any]:
        """Serialize using backend field names."""
        return self.model_dump(mode="json", by_alias=True)

    def merge(self, partial: dict[str, Any]) -> "User":
        """Return a new user with ``partial`` shallow-merged over this one."""
        data = self.to_storage()
        for key, value in partial.items():
            field = type(self).model_fields.get(key)
            if field is not None and field.alias:
                key = field.alias
            elif key == "_id":
                key = "id"
            data[key] = value
        return User.model_validate(data)
