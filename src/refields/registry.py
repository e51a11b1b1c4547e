from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeGuard

from .errors import FieldRegistryError, UnregisteredFieldError
from .field_handles import FieldHandle
from .instrumentation import Cat
from .session import FormSession

RegistrationCallback = Callable[[Optional[FieldHandle]], None]
SubmissionPayload = List[Tuple[str, str]]


class FieldRegistry:
    """
    Live handles for a fixed, ordered set of form fields.

    - The field names are fixed at construction; the handle mapping always has
      exactly those keys.
    - The rendering layer attaches a handle when a field mounts and detaches it
      when the field unmounts (directly, or through `register_handle(name)`).
    - Strict accessors (`get_value`, `get_submission_payload`, `require_handle`)
      raise UnregisteredFieldError for absent handles; `get_all_values` never does.

    One registry per form instance. Pass it explicitly to whatever mounts fields
    and to whatever submits; never keep it as module state.
    """

    def __init__(self, field_names: Iterable[str], *, session: FormSession | None = None) -> None:
        names = tuple(field_names)
        assert len(set(names)) == len(names), f"Duplicate field names: {names!r}"
        self._field_names: Tuple[str, ...] = names
        # field name -> mounted handle (None while absent)
        self._handles: Dict[str, Optional[FieldHandle]] = {name: None for name in names}
        self._session = session

    @classmethod
    def create(cls, field_names: Iterable[str], *, session: FormSession | None = None) -> "FieldRegistry":
        return cls(field_names, session=session)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._field_names

    def _emit_signal(self, msg: str, *, cat: Cat = Cat.REG, level: str | int = "info", **ctx: Any) -> None:
        if self._session:
            self._session.emit_signal(cat, msg, level=level, **ctx)

    def _emit_diag(self, msg: str, *, cat: Cat = Cat.REG, key: str | None = None, **ctx: Any) -> None:
        if self._session:
            self._session.emit_diag(cat, msg, key=key, **ctx)

    def _emit_trace(self, msg: str, *, cat: Cat = Cat.READ, **ctx: Any) -> None:
        if self._session:
            self._session.emit_trace(cat, msg, **ctx)

    def _inc_counter(self, key: str, n: int = 1) -> None:
        if self._session:
            self._session.counters.inc(key, n)

    def stats(self) -> tuple[int, int]:
        """(declared fields, currently mounted fields)"""
        return len(self._field_names), len(self.mounted_names())

    def mounted_names(self) -> List[str]:
        return [name for name in self._field_names if self._handles[name] is not None]

    # --- registration ---

    def attach(self, name: str, handle: FieldHandle) -> None:
        """
        Store the handle of a freshly mounted field. Unknown names are ignored.
        """
        if name not in self._handles:
            self._inc_counter("registry.unknown_field")
            self._emit_diag(
                "Ignoring handle for undeclared field",
                key="REG.unknown_field",
                field=name,
            )
            return

        self._handles[name] = handle
        self._inc_counter("registry.mounts")
        self._emit_diag("Field mounted", cat=Cat.MOUNT, field=name, kind="attach")

    def detach(self, name: str) -> None:
        if name not in self._handles:
            return
        if self._handles[name] is not None:
            self._inc_counter("registry.unmounts")
            self._emit_diag("Field unmounted", cat=Cat.MOUNT, field=name, kind="detach")
        self._handles[name] = None

    def register_handle(self, name: str) -> RegistrationCallback:
        """
        Callback for the field called `name`: call it with the handle on mount and
        with None on unmount.
        """
        def _callback(handle: Optional[FieldHandle]) -> None:
            if handle is None:
                self.detach(name)
            else:
                self.attach(name, handle)

        return _callback

    # --- handles ---

    def get_handle(self, name: str) -> Optional[FieldHandle]:
        return self._handles.get(name)

    @staticmethod
    def is_handle_present(handle: Optional[FieldHandle]) -> TypeGuard[FieldHandle]:
        return handle is not None

    def require_handle(self, name: str) -> FieldHandle:
        handle = self._handles.get(name)
        if not self.is_handle_present(handle):
            self._inc_counter("registry.unregistered_reads")
            self._emit_signal(
                "Strict read of a field with no mounted handle",
                cat=Cat.READ,
                level="warning",
                field=name,
            )
            raise UnregisteredFieldError(name)
        return handle

    def focus(self, name: str) -> None:
        self.require_handle(name).focus()

    # --- values ---

    def get_value(self, name: str) -> str:
        value = self.require_handle(name).value
        self._emit_trace("Field read", field=name)
        return value

    def get_all_values(self) -> Dict[str, Optional[str]]:
        """
        Best-effort snapshot: every declared field, None where nothing is mounted
        or where the mounted handle can no longer be read.
        """
        values: Dict[str, Optional[str]] = {}
        for name in self._field_names:
            handle = self._handles[name]
            if handle is None:
                values[name] = None
                continue
            try:
                values[name] = handle.value
            except FieldRegistryError as e:
                self._inc_counter("registry.unreadable_fields")
                self._emit_diag("Skipping unreadable field in snapshot", cat=Cat.READ, field=name, error=repr(e))
                values[name] = None
        return values

    def get_submission_payload(self) -> SubmissionPayload:
        """
        Ordered (name, value) pairs for every declared field, ready to be used as a
        multipart/form body. All-or-nothing: the first absent field raises.
        """
        handles = [(name, self.require_handle(name)) for name in self._field_names]
        payload = [(name, handle.value) for name, handle in handles]

        self._inc_counter("registry.payloads")
        self._emit_signal("Submission payload built", cat=Cat.SUBMIT, fields=len(payload))
        return payload

    # --- debug helpers ---

    def snapshot(self) -> dict:
        """
        Mount state of every declared field, suitable for JSON/YAML dumping.
        Values are not read here; use get_all_values() for that.
        """
        snapshot = {
            "fields": [
                {
                    "name": name,
                    "mounted": self._handles[name] is not None,
                    "handle": repr(self._handles[name]) if self._handles[name] is not None else None,
                }
                for name in self._field_names
            ],
        }

        self._inc_counter("registry.snapshot_count")
        self._emit_diag(
            "Registry snapshot emitted",
            key="REG.snapshot",
            fields=len(self._field_names),
            mounted=len(self.mounted_names()),
        )
        return snapshot
