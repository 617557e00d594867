import logging
from typing import List

from sqlalchemy.orm import Session

from placehub.database.models import Place, Comment
from placehub.database.schemas import AuthContext
from placehub.services.errors import ForbiddenError, NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)


def _place_or_404(db: Session, place_id: int) -> Place:
    place = db.get(Place, place_id)
    if place is None:
        raise NotFoundError("Place not found")
    return place


def list_comments(db: Session, place_id: int) -> List[Comment]:
    _place_or_404(db, place_id)
    return (
        db.query(Comment)
        .filter(Comment.place_id == place_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )


def add_comment(db: Session, ctx: AuthContext, place_id: int, text: str) -> Comment:
    place = _place_or_404(db, place_id)
    if not text or not text.strip():
        raise ValidationFailed("Comment text is required")

    comment = Comment(user_id=ctx.id, place_id=place.id, comment=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(f"Comment {comment.id} added to place {place.id} by user {ctx.id}")
    return comment


def delete_comment(db: Session, ctx: AuthContext, place_id: int, comment_id: int) -> None:
    _place_or_404(db, place_id)

    comment = db.get(Comment, comment_id)
    if comment is None or comment.place_id != place_id:
        raise NotFoundError("Comment not found")

    if comment.user_id != ctx.id:
        logger.warning(f"User {ctx.id} tried to delete comment {comment_id} written by {comment.user_id}")
        raise ForbiddenError("Unauthorized")

    db.delete(comment)
    db.commit()
    logger.info(f"Comment {comment_id} removed from place {place_id} by user {ctx.id}")
