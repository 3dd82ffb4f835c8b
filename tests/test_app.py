"""Smoke tests driving the Streamlit front end headlessly."""

import os

from streamlit.testing.v1 import AppTest

APP = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'app.py'))


def _app():
    return AppTest.from_file(APP, default_timeout=30).run()


def test_app_renders_without_errors():
    at = _app()
    assert not at.exception
    assert at.session_state["mmu"].get_stats()["translations"] == 0


def test_translate_button_reports_physical_address():
    at = _app()
    at.text_input(key="address").set_value("2050").run()
    at.button(key="translate").click().run()
    assert not at.exception
    assert "Physical Address: 2" in at.success[0].value
    assert at.session_state["mmu"].page_table.lookup(2).valid


def test_invalid_address_is_reported():
    at = _app()
    at.text_input(key="address").set_value("abc").run()
    at.button(key="translate").click().run()
    assert not at.exception
    assert "valid logical address" in at.error[0].value
