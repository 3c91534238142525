"""
Pure access predicates.

``is_superuser`` is the single definition of the admin bypass; the resolver,
the ownership gate and the admin-only route dependency all go through it.
"""
from typing import Any, Iterable, Optional

from ward_admin.features.permissions.schemas import PermissionRecord, PermissionView


ADMIN_ROLE = "admin"

# Id of the synthesized admin row; never stored, never written
ADMIN_RECORD_ID = -1


def is_superuser(user: Any) -> bool:
    """True for an authenticated user whose role is exactly ``admin``."""
    return user is not None and getattr(user, "role", None) == ADMIN_ROLE


def can_modify(record: Any, user: Any) -> bool:
    """
    Decide whether ``user`` may edit or delete ``record``.

    Admins may modify anything. Everyone else only records whose
    ``created_by`` equals their id exactly. A record without attribution
    belongs to nobody.
    """
    if user is None:
        return False
    if is_superuser(user):
        return True
    created_by = getattr(record, "created_by", None)
    return created_by is not None and created_by == user.id


def find_record(records: Iterable[PermissionRecord], module_key: str) -> Optional[PermissionRecord]:
    for record in records:
        if record.module == module_key:
            return record
    return None


def view_for_module(records: Iterable[PermissionRecord], module_key: str) -> PermissionView:
    """Flags of the row for ``module_key``; a missing row grants nothing."""
    record = find_record(records, module_key)
    if record is None:
        return PermissionView.none()
    return record.view()


def admin_record(module_key: str) -> PermissionRecord:
    """The full-access row shown for admins, which has no stored counterpart."""
    return PermissionRecord(
        id=ADMIN_RECORD_ID,
        role=ADMIN_ROLE,
        module=module_key,
        can_view=True,
        can_add=True,
        can_edit=True,
        can_delete=True,
    )
