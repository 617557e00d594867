import os
import subprocess
import sys
from pathlib import Path

import pytest
from sqlalchemy.exc import StatementError

from conftest import make_user
from placehub.database.events import OwnerImmutableError
from placehub.database.models import CategoryEnum, Place


def new_place(owner_id, **overrides):
    fields = dict(
        owner_id=owner_id,
        title="Bike",
        address="1 Main St",
        description="Fast",
        max_guests=1,
        price=10,
        category=CategoryEnum.BICYCLES,
    )
    fields.update(overrides)
    return Place(**fields)


def test_defaults(db):
    user = make_user(db, "henry")
    place = new_place(user.id)
    db.add(place)
    db.commit()
    db.refresh(place)

    assert place.photos == []
    assert place.perks == []
    assert place.rental is False
    assert place.selling is False
    assert place.religion is None


def test_owner_is_immutable(db):
    first = make_user(db, "ivy")
    second = make_user(db, "jack")
    place = new_place(first.id)
    db.add(place)
    db.commit()

    with pytest.raises(OwnerImmutableError):
        place.owner_id = second.id

    db.expire_all()
    assert db.get(Place, place.id).owner_id == first.id


def test_setting_same_owner_is_allowed(db):
    user = make_user(db, "kate")
    place = new_place(user.id)
    db.add(place)
    db.commit()

    place.owner_id = user.id
    db.commit()


def test_unknown_category_rejected_by_column(db):
    user = make_user(db, "liam")
    db.add(new_place(user.id, category="boats"))
    with pytest.raises((LookupError, StatementError)):
        db.commit()
    db.rollback()


OWNER_CHECK_WITHOUT_APP = """
import sys
from placehub.database.database import Base, SessionLocal, engine
from placehub.database.models import CategoryEnum, Place, User
from placehub.database.schemas import AuthContext
from placehub.services import places as place_service

assert "placehub.main" not in sys.modules
Base.metadata.create_all(bind=engine)
db = SessionLocal()
first, second = User(username="first"), User(username="second")
db.add_all([first, second])
db.commit()
place = place_service.create_place(db, AuthContext(id=first.id), {
    "title": "Van", "address": "2 Side St", "description": "Roomy",
    "maxGuests": 2, "price": 30, "category": CategoryEnum.CARS.value,
})
try:
    place.owner_id = second.id
except ValueError:
    sys.exit(0)
sys.exit(1)
"""


def test_owner_guard_active_without_the_app():
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ, DATABASE_URL="sqlite://", SECRET_KEY="test-secret-key")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root), env.get("PYTHONPATH")]))

    result = subprocess.run(
        [sys.executable, "-c", OWNER_CHECK_WITHOUT_APP],
        cwd=root, env=env, capture_output=True, text=True, timeout=60,
    )

    assert result.returncode == 0, result.stderr
