"""
Option bag parsing.

Actions receive loosely-typed mappings with camelCase keys. Each action
declares a pydantic model: required fields have no default, optional
fields carry theirs. Validation failures surface as our ValidationError
carrying the message declared on the field, so callers see
"Bucket is required." rather than pydantic's error dump.
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound="ActionOptions")


def required(message: str, **kwargs: Any) -> Any:
    """Declare a required, non-empty string field with its error message."""
    return Field(min_length=1, json_schema_extra={"error_message": message}, **kwargs)


class ActionOptions(BaseModel):
    """
    Base for every action's option model.

    Unknown keys are ignored because a single bag carries both the
    action's own fields and the connection fields.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # message used when a field declares none of its own
    default_message: ClassVar[str] = "{alias} is invalid."

    @classmethod
    def message_for(cls, name_or_alias: str) -> str:
        """Look up the error message declared for a field."""
        for name, info in cls.model_fields.items():
            if name_or_alias in (name, info.alias):
                extra = info.json_schema_extra
                if isinstance(extra, dict) and extra.get("error_message"):
                    return str(extra["error_message"])
                return cls.default_message.format(alias=info.alias or name)
        return cls.default_message.format(alias=name_or_alias)


def parse_options(model: type[OptionsT], options: Optional[Mapping[str, Any]]) -> OptionsT:
    """
    Validate an option bag against `model`.

    Keys set to None count as absent so the field default applies.
    Raises ValidationError with the first failing field's message.
    """
    bag = {k: v for k, v in (options or {}).items() if v is not None}

    try:
        return model.model_validate(bag)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = first["loc"][0] if first["loc"] else ""
        message = model.message_for(str(loc))

        logger.debug(
            "Option validation failed",
            extra={"model": model.__name__, "field": loc, "error_type": first["type"]},
        )

        raise ValidationError(message, field=str(loc)) from e
