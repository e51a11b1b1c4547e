class FieldRegistryError(RuntimeError):
    """Base class for errors raised by the field registry."""
    pass


class UnregisteredFieldError(FieldRegistryError):
    """Raised when a strict accessor reads a field that has no mounted handle."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Field {field_name!r} has no registered handle (not mounted, or already unmounted)")


class FormSpecError(ValueError):
    """Raised when a form declaration file cannot be turned into a FormSpec."""
    pass


class StaleFieldError(FieldRegistryError):
    """Raised when a mounted handle points at an element the page no longer renders."""
    pass
