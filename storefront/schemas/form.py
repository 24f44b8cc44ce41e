"""Form widget props: fields, conditional logic, actions and validation policy."""

import re
from typing import Literal

from pydantic import Field, field_validator

from storefront.schemas.common import CamelModel

FieldType = Literal[
    "text",
    "email",
    "phone",
    "number",
    "url",
    "password",
    "textarea",
    "select",
    "checkbox",
    "radio",
    "date",
    "file",
]
ConditionOperator = Literal["equals", "not_equals", "contains", "greater_than", "less_than"]
SubmitAction = Literal["email", "webhook", "redirect", "custom"]

FieldValue = str | list[str]


class FieldOption(CamelModel):
    value: str
    label: str


class FieldValidation(CamelModel):
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    custom_message: str | None = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as exc:
                raise ValueError(f"Invalid validation pattern: {exc}") from exc
        return v


class ShowWhen(CamelModel):
    field_id: str
    value: FieldValue
    operator: ConditionOperator


class ConditionalLogic(CamelModel):
    show_when: ShowWhen | None = None


class FormField(CamelModel):
    id: str = Field(..., min_length=1)
    type: FieldType
    label: str
    placeholder: str | None = None
    required: bool = False
    validation: FieldValidation | None = None
    options: list[FieldOption] | None = None
    default_value: FieldValue | None = None
    help_text: str | None = None
    width: Literal["full", "half", "third", "quarter"] | None = None
    conditional_logic: ConditionalLogic | None = None


class SubmitButton(CamelModel):
    text: str = "Submit"
    loading_text: str | None = None
    style: Literal["primary", "secondary", "outline", "minimal"] = "primary"
    size: Literal["sm", "md", "lg"] = "md"
    full_width: bool = False


class FormActions(CamelModel):
    on_submit: SubmitAction = "email"
    email_to: str | None = None
    webhook_url: str | None = None
    redirect_url: str | None = None
    success_message: str | None = None
    error_message: str | None = None


class FormStyling(CamelModel):
    layout: Literal["stacked", "inline", "grid"] = "stacked"
    spacing: Literal["compact", "normal", "loose"] = "normal"
    field_style: Literal["outlined", "filled", "underlined"] = "outlined"
    show_labels: bool = True
    show_placeholders: bool = True
    show_required_indicator: bool = True


class FormValidationPolicy(CamelModel):
    validate_on_blur: bool = True
    validate_on_change: bool = False
    show_errors_inline: bool = True


class FormProps(CamelModel):
    title: str | None = None
    description: str | None = None
    fields: list[FormField] = Field(default_factory=list)
    submit_button: SubmitButton = Field(default_factory=SubmitButton)
    actions: FormActions = Field(default_factory=FormActions)
    styling: FormStyling = Field(default_factory=FormStyling)
    validation: FormValidationPolicy = Field(default_factory=FormValidationPolicy)


class FormSubmitRequest(CamelModel):
    values: dict[str, FieldValue] = Field(default_factory=dict)


class FormSubmitResponse(CamelModel):
    status: Literal["success", "invalid", "redirect", "error"]
    message: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    redirect_url: str | None = None
