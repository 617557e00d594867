from fastapi import APIRouter
from starlette import status
from placehub.database.database import db_dependency
from placehub.database.schemas import CommentCreate, serialize_comment
from placehub.services import comments as comment_service
from placehub.utils.auth_helpers import user_dependency

router = APIRouter(prefix="/places/{place_id}/comments", tags=["Comments"])


@router.get("")
async def get_comments(place_id: int, db: db_dependency):
    comments = comment_service.list_comments(db, place_id)
    return {
        "message": "Comments fetched successfully",
        "comments": [serialize_comment(c) for c in comments],
    }


@router.post("", status_code=status.HTTP_200_OK)
async def add_comment(place_id: int, request: CommentCreate, db: db_dependency, user: user_dependency):
    comment = comment_service.add_comment(db, user, place_id, request.comment)
    return {
        "message": "Comment added successfully",
        "comment": serialize_comment(comment),
    }


@router.delete("/{comment_id}")
async def delete_comment(place_id: int, comment_id: int, db: db_dependency, user: user_dependency):
    comment_service.delete_comment(db, user, place_id, comment_id)
    return {"message": "Comment deleted successfully"}
