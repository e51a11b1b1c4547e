import logging

import pytest
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

from refields import config
from refields.binder import FormBinder
from refields.errors import UnregisteredFieldError
from refields.field_handles import ElementFieldHandle, RadioGroupHandle
from refields.form_spec import DECK_FORM, FieldSpec, FormSpec
from refields.registry import FieldRegistry


def _page(fake_driver, elements_by_selector):
    fake_driver.find_elements.side_effect = lambda by, sel: elements_by_selector.get(sel, [])


def test_mount_attaches_every_rendered_field(session, fake_driver, make_element):
    _page(
        fake_driver,
        {
            "input[name='name']": [make_element("Fire")],
            "textarea[name='desc']": [make_element("A deck")],
            "select[name='select']": [make_element("rouge")],
        },
    )
    registry = FieldRegistry(DECK_FORM.field_names, session=session)

    mounted = FormBinder(session, DECK_FORM, registry).mount()

    assert mounted == ["name", "desc", "select"]
    assert isinstance(registry.get_handle("name"), ElementFieldHandle)
    assert registry.get_submission_payload() == [("name", "Fire"), ("desc", "A deck"), ("select", "rouge")]
    fake_driver.find_elements.assert_any_call(By.CSS_SELECTOR, "input[name='name']")


def test_missing_element_leaves_field_absent(session, fake_driver, make_element):
    _page(fake_driver, {"input[name='name']": [make_element("Fire")]})
    registry = FieldRegistry(DECK_FORM.field_names, session=session)

    mounted = FormBinder(session, DECK_FORM, registry).mount()

    assert mounted == ["name"]
    assert registry.get_all_values() == {"name": "Fire", "desc": None, "select": None}
    assert session.counters.get("binder.missing_fields") == 2
    with pytest.raises(UnregisteredFieldError):
        registry.get_submission_payload()


def test_radio_kind_binds_whole_group(session, fake_driver, make_element):
    spec = FormSpec(form_id="meal", fields=(FieldSpec(name="diet", selector="input[name='diet']", kind="radio"),))
    _page(
        fake_driver,
        {"input[name='diet']": [make_element(attr_value="vegan"), make_element(attr_value="keto", selected=True)]},
    )
    registry = FieldRegistry(spec.field_names, session=session)

    FormBinder(session, spec, registry).mount()

    assert isinstance(registry.get_handle("diet"), RadioGroupHandle)
    assert registry.get_value("diet") == "keto"


def test_lookup_error_is_treated_as_missing(session, fake_driver):
    fake_driver.find_elements.side_effect = WebDriverException("stale")
    registry = FieldRegistry(DECK_FORM.field_names, session=session)

    assert FormBinder(session, DECK_FORM, registry).mount() == []
    assert registry.mounted_names() == []


def test_unmount_detaches_everything(session, fake_driver, make_element):
    _page(fake_driver, {"input[name='name']": [make_element("Fire")]})
    registry = FieldRegistry(DECK_FORM.field_names, session=session)
    binder = FormBinder(session, DECK_FORM, registry)
    binder.mount()

    binder.unmount()

    assert registry.mounted_names() == []
    with pytest.raises(UnregisteredFieldError):
        registry.get_value("name")


def test_mount_waits_then_gives_up_when_nothing_renders(session, fake_driver, caplog):
    registry = FieldRegistry(DECK_FORM.field_names, session=session)
    binder = FormBinder(session, DECK_FORM, registry, wait_s=0)

    with caplog.at_level(logging.WARNING, logger="refields.tests"):
        assert binder.mount() == []
    assert "Timed out waiting for any declared field to render" in caplog.text
    assert registry.get_all_values() == {"name": None, "desc": None, "select": None}


def test_default_wait_uses_configured_wait_time(session, fake_driver, monkeypatch):
    monkeypatch.setattr(config, "WAIT_TIME", 0)
    registry = FieldRegistry(DECK_FORM.field_names, session=session)

    assert FormBinder(session, DECK_FORM, registry).wait_for_form() is False
    assert fake_driver.find_elements.called


def test_wait_returns_once_any_field_is_present(session, fake_driver, make_element):
    _page(fake_driver, {"select[name='select']": [make_element("rouge")]})
    registry = FieldRegistry(DECK_FORM.field_names, session=session)

    assert FormBinder(session, DECK_FORM, registry, wait_s=5).wait_for_form() is True
