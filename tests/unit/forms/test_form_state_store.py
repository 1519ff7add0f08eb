import pytest

from siteflow.forms.state_store import SESSION_KEY, FormStateStore

FORM_ID = "0123456789abcdef"
OTHER_FORM_ID = "fedcba9876543210"


@pytest.mark.unit
def test_get_returns_empty_for_unknown_page() -> None:
    assert FormStateStore().get("shop", "checkout") == {}


@pytest.mark.unit
def test_set_overwrites_single_record_per_page() -> None:
    store = FormStateStore()
    store.set("shop", "checkout", {"formId": FORM_ID, "qty": "3"})
    store.set("shop", "checkout", {"formId": OTHER_FORM_ID})

    assert store.get("shop", "checkout") == {"data": {"formId": OTHER_FORM_ID}, "close": False}


@pytest.mark.unit
def test_get_with_expected_form_id_requires_match() -> None:
    store = FormStateStore()
    store.set("shop", "checkout", {"formId": FORM_ID})

    assert store.get("shop", "checkout", FORM_ID)["data"] == {"formId": FORM_ID}
    assert store.get("shop", "checkout", OTHER_FORM_ID) == {}
    assert store.get("shop", "checkout", "bogus") == {}


@pytest.mark.unit
def test_close_keeps_only_form_id() -> None:
    store = FormStateStore()
    store.set("shop", "checkout", {"formId": FORM_ID, "qty": "3", "note": "x"})

    assert store.close("shop", "checkout", FORM_ID) is True
    assert store.get("shop", "checkout") == {"data": {"formId": FORM_ID}, "close": True}
    assert store.is_closed("shop", "checkout", FORM_ID)
    assert not store.is_closed("shop", "checkout", OTHER_FORM_ID)
    assert not store.has_pending("shop", "checkout")


@pytest.mark.unit
@pytest.mark.parametrize("form_id", [None, "", "xyz", "0123456789abcdef00"])
def test_close_ignores_malformed_form_id(form_id: str | None) -> None:
    store = FormStateStore()
    store.set("shop", "checkout", {"qty": "3"})

    assert store.close("shop", "checkout", form_id) is False
    assert store.has_pending("shop", "checkout")
    assert store.pending_data("shop", "checkout") == {"qty": "3"}


@pytest.mark.unit
def test_get_returns_copy() -> None:
    store = FormStateStore()
    store.set("shop", "checkout", {"formId": FORM_ID})

    store.get("shop", "checkout")["data"]["formId"] = "tampered"

    assert store.pending_data("shop", "checkout") == {"formId": FORM_ID}


@pytest.mark.unit
def test_open_loads_and_flushes_session_once() -> None:
    session: dict[str, object] = {
        SESSION_KEY: {"shop": {"cart": {"data": {"formId": FORM_ID}, "close": True}}},
    }

    with FormStateStore.open(session) as store:
        assert store.is_closed("shop", "cart", FORM_ID)
        store.set("shop", "checkout", {"qty": "2"})
        # 写回只在退出时发生
        assert "checkout" not in session[SESSION_KEY]["shop"]

    assert session[SESSION_KEY]["shop"]["checkout"] == {"data": {"qty": "2"}, "close": False}
    assert session[SESSION_KEY]["shop"]["cart"]["close"] is True


@pytest.mark.unit
def test_open_flushes_on_exception() -> None:
    session: dict[str, object] = {}

    with pytest.raises(RuntimeError), FormStateStore.open(session) as store:
        store.set("shop", "checkout", {"qty": "2"})
        raise RuntimeError("boom")

    assert session[SESSION_KEY] == {"shop": {"checkout": {"data": {"qty": "2"}, "close": False}}}


@pytest.mark.unit
def test_load_drops_malformed_entries() -> None:
    session = {
        SESSION_KEY: {
            "shop": {
                "checkout": {"data": {"qty": 3}, "close": "yes"},
                "broken": "not-a-record",
                "nodata": {"close": True},
            },
            "junk": 42,
        },
    }

    store = FormStateStore.load(session)

    assert store.to_dict() == {"shop": {"checkout": {"data": {"qty": "3"}, "close": False}}}
