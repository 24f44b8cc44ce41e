"""Form widget evaluator: visibility, validation and submission."""

import math

import httpx
import pytest

from storefront.core.config import settings
from storefront.schemas.form import FormActions, FormField, FormProps, ShowWhen
from storefront.services.form_actions import FormActionDispatcher
from storefront.services.forms import (
    FormState,
    evaluate_show_when,
    initial_values,
    to_number,
    validate_field,
)


def _field(field_id: str, field_type: str = "text", **extra) -> FormField:
    return FormField.model_validate({"id": field_id, "type": field_type, "label": field_id.title(), **extra})


def _country_form(**actions) -> FormProps:
    return FormProps(
        fields=[
            _field("country", "select", options=[{"value": "US", "label": "US"}, {"value": "CA", "label": "CA"}]),
            _field(
                "state",
                required=True,
                conditionalLogic={"showWhen": {"fieldId": "country", "value": "US", "operator": "equals"}},
            ),
            _field("email", "email", required=True),
        ],
        actions=FormActions.model_validate(actions or {"onSubmit": "custom"}),
    )


class _RecordingSender:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    async def send(self, to, subject, values):
        if self.fail:
            raise ConnectionError("smtp down")
        self.sent.append((to, subject, values))


def test_conditional_visibility_follows_value():
    """state shows for US and hides for CA."""
    form = FormState(_country_form())
    form.set_value("country", "US")
    assert form.is_visible("state")
    form.set_value("country", "CA")
    assert not form.is_visible("state")


def test_initial_values():
    fields = [
        _field("a"),
        _field("b", "checkbox", options=[{"value": "x", "label": "X"}]),
        _field("c", defaultValue="hello"),
        _field("d", "checkbox"),
    ]
    assert initial_values(fields) == {"a": "", "b": [], "c": "hello", "d": ""}


@pytest.mark.parametrize(
    ("operator", "current", "expected_value", "visible"),
    [
        ("equals", ["b", "a"], ["a", "b"], True),
        ("equals", "x", "y", False),
        ("not_equals", "x", "y", True),
        ("not_equals", "x", "x", False),
        ("contains", ["a", "c"], ["b", "c"], True),
        ("contains", ["a"], ["b"], False),
        ("contains", "abc", ["a"], False),
        ("greater_than", "10", "9", True),
        ("greater_than", "abc", "1", False),
        ("less_than", "", "1", True),
    ],
)
def test_show_when_operators(operator, current, expected_value, visible):
    condition = ShowWhen(field_id="target", value=expected_value, operator=operator)
    assert evaluate_show_when(condition, {"target": current}) is visible


@pytest.mark.parametrize(
    ("operator", "visible"),
    [("equals", False), ("not_equals", True), ("contains", False), ("greater_than", False), ("less_than", False)],
)
def test_dangling_field_reference(operator, visible):
    """A missing target field reads as an absent value, not an error."""
    condition = ShowWhen(field_id="ghost", value="1", operator=operator)
    assert evaluate_show_when(condition, {}) is visible


def test_to_number_coercion():
    assert to_number(" 12 ") == 12
    assert to_number("") == 0
    assert to_number([]) == 0
    assert to_number(["7"]) == 7
    assert to_number("0x10") == 16
    assert math.isnan(to_number(None))
    assert math.isnan(to_number("12abc"))
    assert math.isnan(to_number(["1", "2"]))


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        (_field("name", required=True), "", "Name is required"),
        (_field("tags", "checkbox", required=True, options=[{"value": "a", "label": "A"}]), [], "Tags is required"),
        (_field("email", "email"), "not-an-email", "Please enter a valid email address"),
        (_field("site", "url"), "example.com", "Please enter a valid URL"),
        (_field("phone", "phone"), "call me", "Please enter a valid phone number"),
        (_field("bio", validation={"min": 5}), "abc", "Minimum 5 characters required"),
        (_field("bio", validation={"max": 3}), "abcd", "Maximum 3 characters allowed"),
        (_field("code", validation={"pattern": "^[A-Z]{3}$"}), "abc", "Invalid format"),
        (_field("code", validation={"pattern": "^[A-Z]+$", "customMessage": "Caps only"}), "abc", "Caps only"),
        (_field("qty", "number"), "many", "Please enter a valid number"),
        (_field("qty", "number", validation={"max": 500}), "900", "Maximum value is 500"),
    ],
)
def test_validation_messages(field, value, message):
    assert validate_field(field, value) == message


def test_validation_returns_first_failure_only():
    """Length is checked before the numeric range."""
    field = _field("qty", "number", validation={"min": 3})
    assert validate_field(field, "5") == "Minimum 3 characters required"


def test_valid_values_pass():
    assert validate_field(_field("email", "email", required=True), "a@b.co") is None
    assert validate_field(_field("phone", "phone"), "+1 (555) 123-4567") is None
    assert validate_field(_field("opt"), "") is None


def test_blur_validation_policy():
    form = FormState(_country_form())
    form.blur("email")
    assert form.errors == {"email": "Email is required"}
    form.set_value("email", "a@b.co")
    form.blur("email")
    assert form.errors == {}


def test_change_validation_policy():
    props = _country_form()
    props = props.model_copy(update={"validation": props.validation.model_copy(update={"validate_on_change": True})})
    form = FormState(props)
    form.set_value("email", "nope")
    assert form.errors["email"] == "Please enter a valid email address"


async def test_submit_validates_visible_fields_only():
    """Hidden required fields do not block submission."""
    sender = _RecordingSender()
    form = FormState(_country_form(onSubmit="email", emailTo="owner@example.com"))
    form.set_value("country", "CA")
    form.set_value("email", "a@b.co")
    result = await form.submit(FormActionDispatcher(sender))
    assert result.status == "success"
    assert sender.sent[0][0] == "owner@example.com"
    assert form.values["email"] == ""


async def test_invalid_submit_has_no_side_effect():
    sender = _RecordingSender()
    form = FormState(_country_form(onSubmit="email", emailTo="owner@example.com"))
    form.set_value("country", "US")
    result = await form.submit(FormActionDispatcher(sender))
    assert result.status == "invalid"
    assert set(result.errors) == {"state", "email"}
    assert sender.sent == []


async def test_failed_action_keeps_values():
    form = FormState(_country_form(onSubmit="email", emailTo="owner@example.com"))
    form.set_value("email", "a@b.co")
    result = await form.submit(FormActionDispatcher(_RecordingSender(fail=True)))
    assert result.status == "error"
    assert result.message == settings.FORM_GENERIC_ERROR_MESSAGE
    assert form.values["email"] == "a@b.co"


async def test_webhook_posts_values():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    form = FormState(_country_form(onSubmit="webhook", webhookUrl="https://hooks.example.com/form"))
    form.set_value("email", "a@b.co")
    result = await form.submit(FormActionDispatcher(transport=httpx.MockTransport(handler)))
    assert result.status == "success"
    assert seen[0].method == "POST"
    assert b'"email":"a@b.co"' in seen[0].content.replace(b" ", b"")


async def test_webhook_error_status_fails_submission():
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    form = FormState(_country_form(onSubmit="webhook", webhookUrl="https://hooks.example.com/form", errorMessage="Nope"))
    form.set_value("email", "a@b.co")
    result = await form.submit(FormActionDispatcher(transport=transport))
    assert result.status == "error"
    assert result.message == "Nope"


async def test_redirect_does_not_reset():
    form = FormState(_country_form(onSubmit="redirect", redirectUrl="https://example.com/thanks"))
    form.set_value("email", "a@b.co")
    result = await form.submit(FormActionDispatcher())
    assert result.status == "redirect"
    assert result.redirect_url == "https://example.com/thanks"
    assert form.values["email"] == "a@b.co"
