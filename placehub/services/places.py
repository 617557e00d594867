import os
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Union

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from placehub.database.models import Place, Comment
from placehub.database.schemas import AuthContext, PlaceCreate
from placehub.services.errors import ForbiddenError, NotFoundError, ValidationFailed
from placehub.utils.media import MediaHost, public_id_from_url

load_dotenv()

logger = logging.getLogger(__name__)

# Any authenticated caller may delete any place unless this is switched on.
ENFORCE_DELETE_OWNERSHIP = os.getenv("ENFORCE_DELETE_OWNERSHIP", "false").lower() in ("1", "true", "yes")

MUTABLE_FIELDS = (
    "title", "address", "photos", "description", "perks", "extra_info",
    "max_guests", "price", "category", "rental", "selling", "religion",
)


@dataclass
class MediaCleanupReport:
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def validate_place_fields(fields: Union[PlaceCreate, Mapping]) -> PlaceCreate:
    if isinstance(fields, PlaceCreate):
        return fields
    try:
        return PlaceCreate.model_validate(dict(fields))
    except ValidationError as e:
        raise ValidationFailed("Invalid place data", errors=e.errors(include_url=False, include_context=False, include_input=False))


def _get_or_404(db: Session, place_id: int, *options) -> Place:
    query = db.query(Place)
    if options:
        query = query.options(*options)
    place = query.filter(Place.id == place_id).first()
    if not place:
        raise NotFoundError("Place not found")
    return place


def create_place(db: Session, ctx: AuthContext, fields) -> Place:
    data = validate_place_fields(fields)
    place = Place(owner_id=ctx.id, **data.model_dump(include=set(MUTABLE_FIELDS)))
    db.add(place)
    db.commit()
    db.refresh(place)
    logger.info(f"Place {place.id} created by user {ctx.id}")
    return place


def list_places(db: Session) -> List[Place]:
    return db.query(Place).order_by(Place.id).all()


def list_user_places(db: Session, ctx: AuthContext) -> List[Place]:
    return db.query(Place).filter(Place.owner_id == ctx.id).order_by(Place.id).all()


def get_place(db: Session, place_id: int) -> Place:
    return _get_or_404(db, place_id, selectinload(Place.comments).selectinload(Comment.user))


def update_place(db: Session, ctx: AuthContext, place_id: int, fields) -> Place:
    """
    Replace every mutable field of a place with the given payload.

    The payload must be a complete place: required fields that are missing
    fail validation, and optional fields that are missing go back to their
    defaults. The owner is never changed.
    """
    place = _get_or_404(db, place_id)

    if place.owner_id != ctx.id:
        logger.warning(f"User {ctx.id} tried to update place {place_id} owned by {place.owner_id}")
        raise ForbiddenError("Unauthorized")

    data = validate_place_fields(fields)
    for name, value in data.model_dump(include=set(MUTABLE_FIELDS)).items():
        setattr(place, name, value)

    db.commit()
    db.refresh(place)
    logger.info(f"Place {place.id} updated by user {ctx.id}")
    return place


def delete_place(db: Session, ctx: AuthContext, place_id: int, media: MediaHost,
                 enforce_ownership: bool = ENFORCE_DELETE_OWNERSHIP) -> MediaCleanupReport:
    place = _get_or_404(db, place_id)

    if place.owner_id != ctx.id:
        if enforce_ownership:
            logger.warning(f"User {ctx.id} tried to delete place {place_id} owned by {place.owner_id}")
            raise ForbiddenError("Unauthorized")
        logger.warning(f"User {ctx.id} is deleting place {place_id} owned by {place.owner_id}")

    report = MediaCleanupReport()
    for photo_url in place.photos or []:
        public_id = public_id_from_url(photo_url)
        try:
            media.destroy(public_id)
        except Exception as e:
            logger.warning(f"Could not delete media {public_id} of place {place_id}: {e}")
            report.failed.append(public_id)
        else:
            report.deleted.append(public_id)

    db.delete(place)
    db.commit()
    logger.info(f"Place {place_id} deleted by user {ctx.id} ({len(report.deleted)} photos removed, {len(report.failed)} failed)")
    return report


def search_places(db: Session, term: str) -> List[Place]:
    if not term:
        return list_places(db)
    return (
        db.query(Place)
        .filter(Place.address.icontains(term, autoescape=True))
        .order_by(Place.id)
        .all()
    )
