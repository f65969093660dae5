import pytest

from jiraboard.response.validation import FieldError, ValidationErrorDetail, format_validation_errors


def test_required_message():
    [detail] = format_validation_errors([FieldError("Name", "required", "")])
    assert detail == ValidationErrorDetail(field="name", tag="required", value="", message="name is required")


def test_min_message_uses_param():
    [detail] = format_validation_errors([FieldError("age", "min", 2, "3")])
    assert detail.message == "age must be at least 3 characters"
    assert detail.value == str(2)


def test_oneof_message():
    [detail] = format_validation_errors([FieldError("color", "oneof", "blue", "red green")])
    assert detail.message == "color must be one of: red green"


@pytest.mark.parametrize(
    "tag", ["email", "max", "len", "gt", "gte", "lt", "lte", "uuid", "url", "alpha", "alphanum", "numeric", "json", "custom"]
)
def test_every_message_starts_with_lowercased_field(tag):
    [detail] = format_validation_errors([FieldError("UserName", tag, "x", "5")])
    assert detail.field == detail.field.lower()
    assert detail.message.startswith(detail.field + " ")
    assert detail.tag == tag


def test_unknown_tag_falls_back_to_invalid():
    [detail] = format_validation_errors([FieldError("code", "mystery", "z")])
    assert detail.message.endswith("is invalid")


def test_order_is_preserved():
    errors = [FieldError("a", "required"), FieldError("b", "email", "nope")]
    details = format_validation_errors(errors)
    assert [d.field for d in details] == ["a", "b"]


def test_non_validation_input_gives_empty_list():
    assert format_validation_errors(ValueError("boom")) == []
    assert format_validation_errors(None) == []