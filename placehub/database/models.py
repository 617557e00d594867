import datetime as _dt
from sqlalchemy import (Column, Integer, String, Boolean, DateTime, ForeignKey, Text, JSON, Float, Enum)
import enum
import sqlalchemy.orm as _orm
from placehub.database.database import Base


# ------------------ ENUMS ------------------
class CategoryEnum(enum.Enum):
    CARS = "cars"
    BICYCLES = "bicycles"
    TRIPS = "trips"
    HOUSES = "houses"

class ReligionEnum(enum.Enum):
    ISLAMIC = "islamic"
    OTHERS = "others"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _utcnow():
    return _dt.datetime.now(_dt.timezone.utc).replace(tzinfo=None)


#---------------- USER MODEL ------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)
    date_created = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    places = _orm.relationship("Place", back_populates="owner")
    comments = _orm.relationship("Comment", back_populates="user")


# ------------------ PLACE MODEL ------------------
class Place(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    address = Column(String, nullable=False)
    photos = Column(JSON, nullable=False, default=list)  # ordered list of media URLs
    description = Column(Text, nullable=False)
    perks = Column(JSON, nullable=False, default=list)
    extra_info = Column(Text, nullable=True)
    max_guests = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(Enum(CategoryEnum, name="category_enum", values_callable=_enum_values, validate_strings=True), nullable=False)
    rental = Column(Boolean, nullable=False, default=False)
    selling = Column(Boolean, nullable=False, default=False)
    religion = Column(Enum(ReligionEnum, name="religion_enum", values_callable=_enum_values, validate_strings=True), nullable=True)

    owner = _orm.relationship("User", back_populates="places")
    # comments are looked up through Comment.place_id only
    comments = _orm.relationship(
        "Comment",
        back_populates="place",
        cascade="all, delete",
        order_by=lambda: [Comment.created_at, Comment.id],
    )


# ------------------ COMMENT MODEL ------------------
class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    user = _orm.relationship("User", back_populates="comments")
    place = _orm.relationship("Place", back_populates="comments")


from placehub.database import events  # noqa: E402,F401  model listeners
