from sqlalchemy import event
from sqlalchemy.orm.base import NO_VALUE, NEVER_SET
from placehub.database.models import Place


class OwnerImmutableError(ValueError):
    pass


@event.listens_for(Place.owner_id, "set", active_history=True)
def keep_owner(target, value, oldvalue, initiator):
    if oldvalue in (NO_VALUE, NEVER_SET, None):
        return value
    if value != oldvalue:
        raise OwnerImmutableError(f"Place {target.id} already belongs to user {oldvalue}")
    return value
