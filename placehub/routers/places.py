from fastapi import APIRouter
from starlette import status
from placehub.database.database import db_dependency
from placehub.database.schemas import PlaceCreate, PlaceUpdate, serialize_place
from placehub.services import places as place_service
from placehub.utils.auth_helpers import user_dependency
from placehub.utils.media import media_dependency

router = APIRouter(prefix="/places", tags=["Places"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_places(db: db_dependency):
    places = place_service.list_places(db)
    return {
        "message": "Places fetched successfully",
        "places": [serialize_place(p) for p in places],
    }


# ----------------------------
# Protected routes
# ----------------------------
@router.post("/add-places", status_code=status.HTTP_200_OK)
async def add_place(request: PlaceCreate, db: db_dependency, user: user_dependency):
    place = place_service.create_place(db, user, request)
    return {
        "message": "Place added successfully",
        "place": serialize_place(place),
    }


@router.get("/user-places")
async def user_places(db: db_dependency, user: user_dependency):
    places = place_service.list_user_places(db, user)
    return {
        "message": "User places fetched successfully",
        "places": [serialize_place(p) for p in places],
    }


@router.put("/update-place")
async def update_place(request: PlaceUpdate, db: db_dependency, user: user_dependency):
    place = place_service.update_place(db, user, request.id, request)
    return {
        "message": "Place updated successfully",
        "place": serialize_place(place),
    }


# media cleanup blocks on the network, so this runs in the threadpool
@router.delete("/delete-place/{place_id}")
def delete_place(place_id: int, db: db_dependency, user: user_dependency, media: media_dependency):
    report = place_service.delete_place(db, user, place_id, media)
    response = {
        "message": "Place deleted successfully",
        "deleted_media": report.deleted,
        "failed_media": report.failed,
    }
    if report.failed:
        response["warning"] = f"{len(report.failed)} photo(s) could not be removed from the media host"
    return response


@router.get("/user")
async def current_user(user: user_dependency):
    return {"id": user.id, "name": user.name}


# ----------------------------
# Public routes, registered after the fixed paths above
# ----------------------------
@router.get("/search")
async def search_all_places(db: db_dependency):
    places = place_service.search_places(db, "")
    return {
        "message": "Places fetched successfully",
        "places": [serialize_place(p) for p in places],
    }


@router.get("/search/{key}")
async def search_places(key: str, db: db_dependency):
    places = place_service.search_places(db, key)
    return {
        "message": f"{len(places)} place(s) matched",
        "places": [serialize_place(p) for p in places],
    }


@router.get("/{place_id}")
async def single_place(place_id: int, db: db_dependency):
    place = place_service.get_place(db, place_id)
    return {
        "message": "Place fetched successfully",
        "place": serialize_place(place, with_comments=True),
    }
