# refields/field_handles.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

from .errors import StaleFieldError


@runtime_checkable
class FieldHandle(Protocol):
    """
    Live reference to a rendered input-like element: a current text value and a
    focus action. The rendering layer owns the element; the registry only points at it.
    """

    @property
    def value(self) -> str: ...

    def focus(self) -> None: ...


@dataclass
class StaticFieldHandle:
    """
    In-memory field handle, for forms that are not rendered in a browser.
    """
    value: str = ""
    focused: bool = False

    def focus(self) -> None:
        self.focused = True


class ElementFieldHandle:
    """
    Field handle over a Selenium element (<input>, <textarea> or <select>).

    `value` reads the live DOM property every time, so typed text shows up
    without re-binding.
    """

    def __init__(self, element: WebElement) -> None:
        self.element = element

    @property
    def value(self) -> str:
        try:
            return self.element.get_property("value") or ""
        except StaleElementReferenceException as e:
            raise StaleFieldError(f"Element {self.element.id!r} is no longer attached to the page") from e

    def focus(self) -> None:
        try:
            self.element.parent.execute_script("arguments[0].focus();", self.element)
        except StaleElementReferenceException as e:
            raise StaleFieldError(f"Element {self.element.id!r} is no longer attached to the page") from e

    def __repr__(self) -> str:
        return f"ElementFieldHandle(id={self.element.id!r})"


class RadioGroupHandle:
    """
    One handle for a whole radio group (all <input type="radio"> sharing a name).

    value:
      - value attribute of the checked option
      - "" when nothing is checked yet
    """

    def __init__(self, options: Sequence[WebElement]) -> None:
        if not options:
            raise ValueError("RadioGroupHandle needs at least one radio option")
        self.options = list(options)

    def _checked(self) -> WebElement | None:
        return next((opt for opt in self.options if opt.is_selected()), None)

    @property
    def value(self) -> str:
        try:
            checked = self._checked()
            if checked is None:
                return ""
            return checked.get_attribute("value") or ""
        except StaleElementReferenceException as e:
            raise StaleFieldError("Radio group is no longer attached to the page") from e

    def focus(self) -> None:
        try:
            target = self._checked() or self.options[0]
            target.parent.execute_script("arguments[0].focus();", target)
        except StaleElementReferenceException as e:
            raise StaleFieldError("Radio group is no longer attached to the page") from e

    def __repr__(self) -> str:
        return f"RadioGroupHandle(options={len(self.options)})"
