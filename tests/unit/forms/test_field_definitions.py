import pytest

from siteflow.errors import ConfigurationError
from siteflow.forms.definitions.base import DEFAULT_STRING_PATTERN, FieldKind, FormField
from siteflow.pages.base import FORM_ID_BINDING, SitePage


@pytest.mark.unit
@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("string", FieldKind.STRING),
        ("integer", FieldKind.INTEGER),
        ("int", FieldKind.INTEGER),
        ("float", FieldKind.FLOAT),
        ("double", FieldKind.FLOAT),
        ("boolean", FieldKind.BOOLEAN),
        ("bool", FieldKind.BOOLEAN),
        ("INT", FieldKind.INTEGER),
    ],
)
def test_field_kind_resolves_tags_and_aliases(tag: str, expected: FieldKind) -> None:
    assert FieldKind.resolve(tag) is expected


@pytest.mark.unit
@pytest.mark.parametrize("tag", ["date", "long", ""])
def test_field_kind_rejects_unknown_tags(tag: str) -> None:
    with pytest.raises(ConfigurationError):
        FieldKind.resolve(tag)


@pytest.mark.unit
def test_from_tag_builds_validated_descriptor() -> None:
    field = FormField.from_tag("qty", "int", optional=False, min=1, max=10)

    assert field.field_kind is FieldKind.INTEGER
    assert field.attribute == "qty"
    assert (field.min, field.max) == (1, 10)


@pytest.mark.unit
def test_string_field_defaults_to_non_empty_pattern() -> None:
    assert FormField("note").effective_pattern == DEFAULT_STRING_PATTERN


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "string", "min": 1},
        {"kind": "integer", "pattern": r"^\d+$"},
        {"kind": "integer", "min": 5, "max": 1},
        {"kind": "string", "pattern": "("},
        {"kind": "float", "max": "10"},
    ],
)
def test_from_tag_rejects_inconsistent_descriptors(kwargs: dict[str, object]) -> None:
    params = dict(kwargs)
    tag = str(params.pop("kind"))
    with pytest.raises(ConfigurationError):
        FormField.from_tag("field", tag, optional=False, **params)


@pytest.mark.unit
def test_form_id_binding_maps_to_form_id_attribute() -> None:
    assert FORM_ID_BINDING.name == "formId"
    assert FORM_ID_BINDING.attribute == "form_id"
    assert FORM_ID_BINDING.optional is False


@pytest.mark.unit
def test_page_class_definition_validates_declared_fields() -> None:
    with pytest.raises(ConfigurationError):

        class _BrokenPage(SitePage):
            fields = (FormField("qty", FieldKind.INTEGER, pattern=r"^\d+$"),)

            def authorize(self) -> bool:
                return True

            def view(self) -> None:
                return None

            def check(self) -> bool:
                return True


@pytest.mark.unit
def test_page_class_definition_rejects_duplicate_fields() -> None:
    with pytest.raises(ConfigurationError, match="重复"):

        class _DuplicatePage(SitePage):
            fields = (FormField("qty", FieldKind.INTEGER), FormField("qty", FieldKind.INTEGER))

            def authorize(self) -> bool:
                return True

            def view(self) -> None:
                return None

            def check(self) -> bool:
                return True


@pytest.mark.unit
def test_page_class_definition_rejects_reserved_attribute_names() -> None:
    with pytest.raises(ConfigurationError, match="保留属性"):

        class _ShadowingPage(SitePage):
            fields = (FormField("request", FieldKind.STRING),)

            def authorize(self) -> bool:
                return True

            def view(self) -> None:
                return None

            def check(self) -> bool:
                return True
