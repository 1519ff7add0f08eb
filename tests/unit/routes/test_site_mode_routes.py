import re
import xml.etree.ElementTree as ET

import pytest
from flask import template_rendered

from siteflow import create_app
from siteflow.areas.shop.checkout import CheckoutPage
from siteflow.forms.state_store import SESSION_KEY
from siteflow.pages.registry import PageRegistry
from siteflow.services.site import ResponseAssembler
from siteflow.services.site.response_assembler import DEBUG_RESPONSE_FILE, DEBUG_SUB_DIR
from siteflow.settings import Settings

CHECKOUT_URL = "/site/shop/checkout"
_FORM_ID_RE = re.compile(r'name="formId" value="([0-9a-f]{16})"')
_STATUS_RE = re.compile(r'class="checkout" data-status="([A-Z]+)"')


def _form_id(html: str) -> str:
    match = _FORM_ID_RE.search(html)
    assert match is not None
    return match.group(1)


def _status(html: str) -> str:
    match = _STATUS_RE.search(html)
    assert match is not None
    return match.group(1)


def _checkout_record(client) -> dict[str, object]:  # noqa: ANN001
    with client.session_transaction() as session:
        return session.get(SESSION_KEY, {}).get("shop", {}).get("checkout", {})


@pytest.mark.unit
def test_first_visit_renders_init_with_form_id(client) -> None:
    response = client.get(CHECKOUT_URL)

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert _status(html) == "INIT"
    assert _form_id(html)
    assert _checkout_record(client) == {}


@pytest.mark.unit
def test_checkout_reject_restore_accept_repeat_flow(client) -> None:
    form_id = _form_id(client.get(CHECKOUT_URL).get_data(as_text=True))

    rejected = client.post(CHECKOUT_URL, data={"formId": form_id, "qty": "15"})
    html = rejected.get_data(as_text=True)
    assert rejected.status_code == 200
    assert _status(html) == "REJECTED"
    assert 'data-reason="PARAM_SIZE"' in html
    assert 'data-reference="qty"' in html
    assert _checkout_record(client) == {"data": {"formId": form_id}, "close": False}

    restored = client.get(CHECKOUT_URL).get_data(as_text=True)
    assert _status(restored) == "RESTORED"
    assert _form_id(restored) == form_id

    accepted = client.post(CHECKOUT_URL, data={"formId": form_id, "qty": "3", "note": "door 2"})
    html = accepted.get_data(as_text=True)
    assert _status(html) == "ACCEPTED"
    assert 'data-reason="ORDER_PLACED"' in html
    assert _checkout_record(client) == {"data": {"formId": form_id}, "close": True}

    repeated = client.post(CHECKOUT_URL, data={"formId": form_id, "qty": "3"})
    assert _status(repeated.get_data(as_text=True)) == "REPEATED"
    assert _checkout_record(client) == {"data": {"formId": form_id}, "close": True}

    fresh = client.get(CHECKOUT_URL).get_data(as_text=True)
    assert _status(fresh) == "INIT"
    assert _form_id(fresh) != form_id


@pytest.mark.unit
def test_business_rejection_keeps_submitted_values(client) -> None:
    form_id = _form_id(client.get(CHECKOUT_URL).get_data(as_text=True))

    response = client.post(CHECKOUT_URL, data={"formId": form_id, "qty": "2", "gift": "1"})
    html = response.get_data(as_text=True)

    assert _status(html) == "REJECTED"
    assert 'data-reason="GIFT_NOTE_REQUIRED"' in html
    assert 'data-reference="note"' in html
    assert 'name="qty" type="number"' in html
    assert _checkout_record(client) == {"data": {"formId": form_id, "qty": "2", "gift": "1"}, "close": False}


@pytest.mark.unit
def test_json_body_is_accepted(client) -> None:
    form_id = _form_id(client.get(CHECKOUT_URL).get_data(as_text=True))

    response = client.post(CHECKOUT_URL, json={"formId": form_id, "qty": 4, "gift": False, "note": None})

    assert _status(response.get_data(as_text=True)) == "ACCEPTED"


@pytest.mark.unit
def test_path_inputs_are_routed(client) -> None:
    response = client.get(f"{CHECKOUT_URL}/step/2")

    assert response.status_code == 200
    assert _status(response.get_data(as_text=True)) == "INIT"


@pytest.mark.unit
def test_unknown_page_renders_not_found(client) -> None:
    response = client.get("/site/shop/missing")

    assert response.status_code == 404
    html = response.get_data(as_text=True)
    assert 'data-status="404"' in html
    assert 'data-code="PAGE_NOT_FOUND"' in html


@pytest.mark.unit
def test_forbidden_page_renders_forbidden_and_ignores_body() -> None:
    class _ClosedCheckout(CheckoutPage):
        def authorize(self) -> bool:
            return False

    registry = PageRegistry()
    registry.register("shop", "checkout", _ClosedCheckout)
    client = create_app(settings=Settings.load(), registry=registry).test_client()

    response = client.post(CHECKOUT_URL, data={"formId": "0123456789abcdef", "qty": "3"})

    assert response.status_code == 403
    assert 'data-code="PAGE_FORBIDDEN"' in response.get_data(as_text=True)
    assert _checkout_record(client) == {}


@pytest.mark.unit
def test_misconfigured_page_returns_error_envelope() -> None:
    registry = PageRegistry()
    registry.register("shop", "checkout", object)
    client = create_app(settings=Settings.load(), registry=registry).test_client()

    response = client.get(CHECKOUT_URL)

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] is True
    assert payload["success"] is False
    assert payload["category"] == "configuration"


@pytest.mark.unit
def test_session_groups_are_available_to_templates(monkeypatch) -> None:
    monkeypatch.setenv("SITE_SESSION_INTO_RESPONSE", "form")
    app = create_app(settings=Settings.load())
    captured: dict[str, object] = {}

    def _record(sender, template, context, **extra):  # noqa: ANN001, ANN003
        captured["document"] = context.get("document")

    template_rendered.connect(_record, app)
    try:
        app.test_client().get(CHECKOUT_URL)
    finally:
        template_rendered.disconnect(_record, app)

    document = captured["document"]
    assert document.session is not None
    assert document.session.child("form") is not None


def _seed_pending_checkout(client) -> dict[str, object]:  # noqa: ANN001
    record = {"data": {"formId": "0123456789abcdef", "qty": "4"}, "close": False}
    with client.session_transaction() as session:
        session[SESSION_KEY] = {"shop": {"checkout": record}}
    return record


@pytest.mark.unit
def test_form_id_with_trailing_newline_is_rejected_over_http(client) -> None:
    form_id = _form_id(client.get(CHECKOUT_URL).get_data(as_text=True))

    for _ in range(2):
        response = client.post(CHECKOUT_URL, data={"formId": f"{form_id}\n", "qty": "3"})
        html = response.get_data(as_text=True)

        assert response.status_code == 200
        assert _status(html) == "REJECTED"
        assert 'data-reason="PARAM_PATTERN"' in html
        assert 'data-reference="formId"' in html
        assert _checkout_record(client).get("close") is False


@pytest.mark.unit
def test_not_found_keeps_pending_record(client) -> None:
    record = _seed_pending_checkout(client)

    response = client.get("/site/shop/missing")

    assert response.status_code == 404
    assert _checkout_record(client) == record


@pytest.mark.unit
def test_forbidden_keeps_pending_record() -> None:
    class _ClosedCheckout(CheckoutPage):
        def authorize(self) -> bool:
            return False

    registry = PageRegistry()
    registry.register("shop", "checkout", _ClosedCheckout)
    client = create_app(settings=Settings.load(), registry=registry).test_client()
    record = _seed_pending_checkout(client)

    response = client.post(CHECKOUT_URL, data={"formId": "0123456789abcdef", "qty": "3"})

    assert response.status_code == 403
    assert _checkout_record(client) == record


@pytest.mark.unit
def test_debug_response_file_written_after_render(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SITE_DEBUG_RESPONSE_FILE", "true")
    client = create_app(settings=Settings.load()).test_client()

    response = client.get(CHECKOUT_URL)

    assert response.status_code == 200
    target = tmp_path / DEBUG_SUB_DIR / DEBUG_RESPONSE_FILE
    assert target.exists()
    assert ET.parse(target).getroot().find("form").get("status") == "INIT"


@pytest.mark.unit
def test_debug_response_file_skipped_when_render_fails(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SITE_DEBUG_RESPONSE_FILE", "true")
    client = create_app(settings=Settings.load()).test_client()

    def _broken_render(self, document, template):  # noqa: ANN001, ANN202
        raise RuntimeError("template exploded")

    monkeypatch.setattr(ResponseAssembler, "render", _broken_render)

    response = client.get(CHECKOUT_URL)

    assert response.status_code == 500
    assert not (tmp_path / DEBUG_SUB_DIR / DEBUG_RESPONSE_FILE).exists()
