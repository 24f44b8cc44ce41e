"""Runtime behaviour of the ``form`` widget: values, visibility, validation, submit.

Coercion follows what the builder's browser runtime does, so a form behaves
the same whether it is evaluated client side or posted to the public submit
endpoint.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping

from storefront.core.config import settings
from storefront.core.exceptions import FormActionError
from storefront.schemas.form import FieldValue, FormField, FormProps, FormSubmitResponse, ShowWhen
from storefront.services.form_actions import FormActionDispatcher

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_RE = re.compile(r"^https?://.+")
PHONE_RE = re.compile(r"^[\+]?[\d\s\-\(\)]+$")
_NUMERIC_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


def to_number(value: object) -> float:
    """Numeric coercion with browser semantics: blank is 0, garbage is NaN."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, list):
        if not value:
            return 0.0
        return to_number(value[0]) if len(value) == 1 else math.nan
    text = str(value).strip()
    if text == "":
        return 0.0
    if _NUMERIC_RE.match(text):
        return float(text)
    if _HEX_RE.match(text):
        return float(int(text, 16))
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    return math.nan


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def initial_value(field: FormField) -> FieldValue:
    if field.default_value is not None:
        return list(field.default_value) if isinstance(field.default_value, list) else field.default_value
    if field.type == "checkbox" and field.options:
        return []
    return ""


def initial_values(fields: Iterable[FormField]) -> dict[str, FieldValue]:
    return {f.id: initial_value(f) for f in fields}


def evaluate_show_when(condition: ShowWhen, values: Mapping[str, FieldValue]) -> bool:
    """Evaluate one ``showWhen`` clause against the current values.

    A reference to a field that does not exist reads as a missing value, so
    ``equals``/``contains``/numeric comparisons come out false and
    ``not_equals`` comes out true.
    """
    current = values.get(condition.field_id)
    expected = condition.value
    op = condition.operator
    if op == "equals":
        if isinstance(current, list) and isinstance(expected, list):
            return sorted(current) == sorted(expected)
        return current == expected
    if op == "not_equals":
        return current != expected
    if op == "contains":
        if isinstance(current, list) and isinstance(expected, list):
            return any(v in current for v in expected)
        return False
    if op == "greater_than":
        return to_number(current) > to_number(expected)
    if op == "less_than":
        return to_number(current) < to_number(expected)
    return True


def is_field_visible(field: FormField, values: Mapping[str, FieldValue]) -> bool:
    logic = field.conditional_logic
    if logic is None or logic.show_when is None:
        return True
    return evaluate_show_when(logic.show_when, values)


def compute_visible_fields(fields: Iterable[FormField], values: Mapping[str, FieldValue]) -> set[str]:
    return {f.id for f in fields if is_field_visible(f, values)}


def validate_field(field: FormField, value: FieldValue | None) -> str | None:
    """Return the first failing rule's message, or ``None``."""
    errors: list[str] = []
    rules = field.validation

    if field.required and (not value or (isinstance(value, list) and len(value) == 0)):
        errors.append(f"{field.label} is required")

    if value and not isinstance(value, list):
        if field.type == "email" and not EMAIL_RE.search(value):
            errors.append("Please enter a valid email address")
        if field.type == "url" and not URL_RE.search(value):
            errors.append("Please enter a valid URL")
        if field.type == "phone" and not PHONE_RE.search(value):
            errors.append("Please enter a valid phone number")

        # A zero bound is "unset", matching the browser runtime.
        if rules and rules.min and len(value) < rules.min:
            errors.append(f"Minimum {_fmt(rules.min)} characters required")
        if rules and rules.max and len(value) > rules.max:
            errors.append(f"Maximum {_fmt(rules.max)} characters allowed")

        if rules and rules.pattern and not re.search(rules.pattern, value):
            errors.append(rules.custom_message or "Invalid format")

        if field.type == "number":
            number = to_number(value)
            if math.isnan(number):
                errors.append("Please enter a valid number")
            else:
                if rules and rules.min and number < rules.min:
                    errors.append(f"Minimum value is {_fmt(rules.min)}")
                if rules and rules.max and number > rules.max:
                    errors.append(f"Maximum value is {_fmt(rules.max)}")

    return errors[0] if errors else None


class FormState:
    """State of one form instance: values, visible fields, errors, submit status."""

    def __init__(self, props: FormProps):
        self.props = props
        self._fields = {f.id: f for f in props.fields}
        self.values: dict[str, FieldValue] = initial_values(props.fields)
        self.visible: set[str] = compute_visible_fields(props.fields, self.values)
        self.errors: dict[str, str] = {}
        self.status = "idle"
        self.message: str | None = None

    def _recompute_visibility(self) -> None:
        self.visible = compute_visible_fields(self.props.fields, self.values)

    def is_visible(self, field_id: str) -> bool:
        return field_id in self.visible

    def visible_fields(self) -> list[FormField]:
        return [f for f in self.props.fields if f.id in self.visible]

    def _record(self, field_id: str) -> None:
        error = validate_field(self._fields[field_id], self.values.get(field_id))
        if error:
            self.errors[field_id] = error
        else:
            self.errors.pop(field_id, None)

    def set_value(self, field_id: str, value: FieldValue) -> None:
        if field_id not in self._fields:
            raise KeyError(f"Unknown form field '{field_id}'")
        self.values[field_id] = value
        self._recompute_visibility()
        if self.props.validation.validate_on_change:
            self._record(field_id)

    def load_values(self, values: Mapping[str, FieldValue]) -> None:
        """Apply a batch of submitted values; unknown field ids are ignored."""
        for field_id, value in values.items():
            if field_id in self._fields:
                self.values[field_id] = value
            else:
                logger.debug("Ignoring value for unknown form field %r", field_id)
        self._recompute_visibility()

    def blur(self, field_id: str) -> None:
        if field_id not in self._fields:
            raise KeyError(f"Unknown form field '{field_id}'")
        if self.props.validation.validate_on_blur:
            self._record(field_id)

    def validate_visible(self) -> dict[str, str]:
        errors = {}
        for field in self.visible_fields():
            error = validate_field(field, self.values.get(field.id))
            if error:
                errors[field.id] = error
        return errors

    def reset(self) -> None:
        self.values = initial_values(self.props.fields)
        self._recompute_visibility()
        self.errors = {}

    async def submit(self, dispatcher: FormActionDispatcher) -> FormSubmitResponse:
        """Validate visible fields, then run the configured submit action.

        Invalid input aborts before any side effect. A failed side effect keeps
        values and field errors as they were and reports a generic message.
        """
        errors = self.validate_visible()
        self.errors = errors
        if errors:
            self.status = "invalid"
            self.message = None
            return FormSubmitResponse(status="invalid", errors=errors)

        actions = self.props.actions
        try:
            outcome = await dispatcher.dispatch(actions, dict(self.values), form_title=self.props.title)
        except FormActionError as exc:
            logger.warning("Form submit action %r failed: %s", actions.on_submit, exc.detail)
            self.status = "error"
            self.message = actions.error_message or settings.FORM_GENERIC_ERROR_MESSAGE
            return FormSubmitResponse(status="error", message=self.message)

        if outcome.redirect_url:
            self.status = "redirect"
            return FormSubmitResponse(status="redirect", redirect_url=outcome.redirect_url)

        self.reset()
        self.status = "success"
        self.message = actions.success_message
        return FormSubmitResponse(status="success", message=self.message)
