from pydantic import BaseModel, Field, AliasChoices, field_validator
from placehub.database.models import CategoryEnum, ReligionEnum
from typing import List, Optional
from datetime import datetime


class CreateUserRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=72)
    name: Optional[str] = None


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class AuthContext(BaseModel):
    """Identity of the caller, resolved from the bearer token."""
    id: int
    name: Optional[str] = None


# ---------- Places ----------
class PlaceCreate(BaseModel):
    title: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    photos: List[str] = Field(default_factory=list, validation_alias=AliasChoices("addedPhotos", "photos"))
    description: str = Field(..., min_length=1)
    perks: List[str] = Field(default_factory=list)
    extra_info: Optional[str] = Field(None, validation_alias=AliasChoices("extraInfo", "extra_info"))
    max_guests: int = Field(..., ge=0, validation_alias=AliasChoices("maxGuests", "max_guests"))
    price: float = Field(..., ge=0)
    category: CategoryEnum
    rental: bool = False
    selling: bool = False
    religion: Optional[ReligionEnum] = None

    @field_validator("perks")
    @classmethod
    def unique_perks(cls, perks):
        # perks behave like a set but keep the order they were picked in
        return list(dict.fromkeys(perks))


class PlaceUpdate(PlaceCreate):
    id: int


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)


class CommentOut(BaseModel):
    id: int
    comment: str
    place: int = Field(validation_alias="place_id")
    created_at: datetime = Field(serialization_alias="createdAt")


class PlaceOut(BaseModel):
    id: int
    owner: int = Field(validation_alias="owner_id")
    title: str
    address: str
    photos: List[str] = []
    description: str
    perks: List[str] = []
    extra_info: Optional[str] = Field(None, serialization_alias="extraInfo")
    max_guests: int = Field(serialization_alias="maxGuests")
    price: float
    category: CategoryEnum
    rental: bool = False
    selling: bool = False
    religion: Optional[ReligionEnum] = None


def serialize_user(user) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name or user.username}


def serialize_comment(comment) -> dict:
    data = CommentOut.model_validate(comment, from_attributes=True).model_dump(mode="json", by_alias=True)
    data["user"] = serialize_user(comment.user)
    return data


def serialize_place(place, with_comments: bool = False) -> dict:
    data = PlaceOut.model_validate(place, from_attributes=True).model_dump(mode="json", by_alias=True)
    if with_comments:
        data["comments"] = [serialize_comment(c) for c in place.comments]
    return data
