"""Shared schema types: the camelCase document base."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for page-builder documents.

    Python attributes are snake_case; the JSON document (editor payloads and the
    ``sections`` column) uses camelCase, as the builder UI writes it.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

