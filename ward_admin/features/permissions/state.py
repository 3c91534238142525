"""
Optimistic local state.

``LocalState`` holds a value that is changed immediately and then confirmed
by an asynchronous write. If the write fails the value snaps back to what it
was before the change and the failure callback fires once. Values should be
immutable (tuples, frozen models) so the snapshot cannot be mutated under us.
"""
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

from ward_admin.features.permissions.access import ADMIN_RECORD_ID, find_record
from ward_admin.features.permissions.registry import LOCKED_VIEW_MODULES, MODULES, ModuleDef
from ward_admin.features.permissions.schemas import (
    ModuleDefResponse,
    PermissionMatrixRow,
    PermissionRecord,
)
from ward_admin.features.permissions.service import (
    PermissionNotFoundError,
    ReadOnlyPermissionError,
    validate_field,
)
from ward_admin.utils import get_logger


log = get_logger(__name__)

T = TypeVar("T")

FailureCallback = Callable[[str], None]
PermissionWriter = Callable[[int, str, bool], Awaitable[Any]]

UPDATE_FAILED_MESSAGE = "Could not update the permission. Please try again."


class LocalState(Generic[T]):
    """Apply a change locally, await its confirmation, keep it or roll back."""

    def __init__(
        self,
        value: T,
        on_failure: Optional[FailureCallback] = None,
        failure_message: str = UPDATE_FAILED_MESSAGE,
    ):
        self._value = value
        self._on_failure = on_failure
        self.failure_message = failure_message

    @property
    def value(self) -> T:
        return self._value

    def reset(self, value: T) -> None:
        """Replace the value wholesale, e.g. after a fresh load."""
        self._value = value

    async def apply(
        self,
        change: Callable[[T], T],
        confirm: Callable[[], Awaitable[Any]],
    ) -> bool:
        """
        Run an optimistic update.

        Returns:
            True when ``confirm`` succeeded and the change is kept, False when
            it raised and the previous value was restored
        """
        snapshot = self._value
        self._value = change(snapshot)
        try:
            await confirm()
        except Exception:
            self._value = snapshot
            log.warning("Optimistic update rolled back", exc_info=True)
            if self._on_failure is not None:
                self._on_failure(self.failure_message)
            return False
        return True


class PermissionMatrix(LocalState[tuple[PermissionRecord, ...]]):
    """
    Local view of the permission grid.

    Every toggle is its own single-flag write; rows are never created or
    deleted here.
    """

    def __init__(
        self,
        records: Iterable[PermissionRecord] = (),
        on_failure: Optional[FailureCallback] = None,
    ):
        super().__init__(tuple(records), on_failure=on_failure)

    def find(self, role: str, module_key: str) -> Optional[PermissionRecord]:
        return find_record((r for r in self.value if r.role == role), module_key)

    def get(self, permission_id: int) -> Optional[PermissionRecord]:
        for record in self.value:
            if record.id == permission_id:
                return record
        return None

    def rows(self, role: str, modules: Iterable[ModuleDef] = MODULES) -> list[PermissionMatrixRow]:
        """Registry modules paired with the role's stored row, if any."""
        return [
            PermissionMatrixRow(
                module=ModuleDefResponse(key=module.key, label=module.label, level=module.level),
                permission=self.find(role, module.key),
                view_locked=module.key in LOCKED_VIEW_MODULES,
            )
            for module in modules
        ]

    async def set(self, permission_id: int, field: str, value: bool, writer: PermissionWriter) -> bool:
        """
        Set one flag locally, then persist it through ``writer``.

        Raises:
            ReadOnlyPermissionError: for the synthesized admin row
            InvalidPermissionFieldError: for an unknown flag name
            PermissionNotFoundError: if the row is not in the local view
        """
        if permission_id == ADMIN_RECORD_ID:
            raise ReadOnlyPermissionError()
        validate_field(field)
        if self.get(permission_id) is None:
            raise PermissionNotFoundError(permission_id)

        def change(records: tuple[PermissionRecord, ...]) -> tuple[PermissionRecord, ...]:
            return tuple(
                r.model_copy(update={field: value}) if r.id == permission_id else r
                for r in records
            )

        return await self.apply(change, lambda: writer(permission_id, field, value))

    async def toggle(self, permission_id: int, field: str, writer: PermissionWriter) -> bool:
        """Flip one flag; see ``set``."""
        validate_field(field)
        current = self.get(permission_id)
        if current is None:
            if permission_id == ADMIN_RECORD_ID:
                raise ReadOnlyPermissionError()
            raise PermissionNotFoundError(permission_id)
        return await self.set(permission_id, field, not getattr(current, field), writer)
