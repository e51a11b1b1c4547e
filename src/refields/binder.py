# refields/binder.py
from __future__ import annotations

from typing import List

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By

from .field_handles import ElementFieldHandle, FieldHandle, RadioGroupHandle
from .form_spec import FieldSpec, FormSpec
from .instrumentation import Cat
from .registry import FieldRegistry
from .session import FormSession


class FormBinder:
    """
    Mounts the fields of a rendered page into a FieldRegistry.

    The page plays the rendering layer: every field found on the page is attached
    through its registration callback, every field left out stays absent.
    """

    def __init__(
        self,
        session: FormSession,
        spec: FormSpec,
        registry: FieldRegistry,
        *,
        wait_s: float | None = None,
    ) -> None:
        self.session = session
        self.spec = spec
        self.registry = registry
        # None -> config.WAIT_TIME through session.get_wait()
        self.wait_s = wait_s

    def _ctx(self, fs: FieldSpec) -> dict:
        return {"form": self.spec.form_id, "field": fs.name, "kind": fs.kind}

    def _form_rendered(self, driver) -> bool:
        return any(driver.find_elements(By.CSS_SELECTOR, fs.selector) for fs in self.spec.fields)

    def wait_for_form(self) -> bool:
        """
        Wait until at least one declared field is on the page.
        Returns False on timeout; fields still missing afterwards stay unmounted.
        """
        try:
            self.session.get_wait(self.wait_s).until(self._form_rendered)
            return True
        except TimeoutException:
            self.session.emit_signal(
                Cat.BIND,
                "Timed out waiting for any declared field to render",
                level="warning",
                form=self.spec.form_id,
            )
        except WebDriverException as e:
            self.session.emit_signal(
                Cat.BIND,
                f"Waiting for the form failed: {e!r}",
                level="warning",
                form=self.spec.form_id,
            )
        return False

    def _locate(self, fs: FieldSpec) -> FieldHandle | None:
        try:
            elements = self.session.driver.find_elements(By.CSS_SELECTOR, fs.selector)
        except WebDriverException as e:
            self.session.emit_signal(
                Cat.BIND,
                f"Lookup failed for selector {fs.selector!r}: {e!r}",
                level="warning",
                **self._ctx(fs),
            )
            return None

        if not elements:
            return None
        if fs.kind == "radio":
            return RadioGroupHandle(elements)
        if len(elements) > 1:
            self.session.emit_diag(
                Cat.BIND,
                f"Selector matched {len(elements)} elements; using the first",
                **self._ctx(fs),
            )
        return ElementFieldHandle(elements[0])

    def mount(self) -> List[str]:
        """
        Attach every field found on the current page. Returns the mounted names.
        """
        self.wait_for_form()
        mounted: List[str] = []
        for fs in self.spec.fields:
            handle = self._locate(fs)
            if handle is None:
                self.session.counters.inc("binder.missing_fields")
                self.session.emit_signal(
                    Cat.BIND,
                    f"No element for selector {fs.selector!r}; field stays unmounted",
                    level="warning",
                    **self._ctx(fs),
                )
                continue
            self.registry.register_handle(fs.name)(handle)
            mounted.append(fs.name)

        self.session.emit_signal(
            Cat.BIND,
            "Form mounted",
            form=self.spec.form_id,
            mounted=len(mounted),
            declared=len(self.spec.fields),
        )
        return mounted

    def unmount(self) -> None:
        for fs in self.spec.fields:
            self.registry.register_handle(fs.name)(None)
        self.session.emit_signal(Cat.BIND, "Form unmounted", form=self.spec.form_id)
