from datetime import datetime

from pydantic import BaseModel


def apply_patch(record, patch: BaseModel, *, exclude=()) -> dict:
    """Copy the fields the client actually sent onto ``record``.

    Omitted fields are left untouched; a field sent as an explicit ``null``
    clears the column. Returns the applied changes.
    """
    changes = patch.model_dump(exclude_unset=True, exclude=set(exclude))

    for field, value in changes.items():
        setattr(record, field, value)

    if hasattr(record, "updated_at"):
        record.updated_at = datetime.utcnow()

    return changes
