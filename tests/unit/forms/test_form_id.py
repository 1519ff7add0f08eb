import pytest

from siteflow.forms.form_id import FORM_ID_LENGTH, generate_form_id, is_form_id


@pytest.mark.unit
def test_generate_form_id_is_lowercase_hex_of_fixed_length() -> None:
    form_id = generate_form_id()

    assert len(form_id) == FORM_ID_LENGTH
    assert form_id == form_id.lower()
    assert is_form_id(form_id)


@pytest.mark.unit
def test_generate_form_id_is_not_repeated() -> None:
    assert len({generate_form_id() for _ in range(50)}) == 50


@pytest.mark.unit
@pytest.mark.parametrize("value", ["0123456789abcdef", "0123456789ABCDEF"])
def test_is_form_id_accepts_hex_of_either_case(value: str) -> None:
    assert is_form_id(value)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    ["", "0123456789abcde", "0123456789abcdef0", "0123456789abcdeg", "0123456789abcdef\n", None, 1234],
)
def test_is_form_id_rejects_malformed_values(value: object) -> None:
    assert not is_form_id(value)
