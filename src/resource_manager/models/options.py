"""Typed options accepted by the save and read operations."""

from collections.abc import Mapping
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator

from resource_manager.utils.constants import DEFAULT_CANNED_ACL


class _OptionsModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Keys that belong to a sibling model and are discarded here
    _ignored_keys: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def coerce(cls, value: "Self | Mapping[str, Any] | None") -> Self:
        """Return ``value`` as an options model, validating plain mappings."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, _OptionsModel):
            value = value.model_dump(exclude_unset=True)
        return cls.model_validate(dict(value))

    @model_validator(mode="before")
    @classmethod
    def collect_extra_params(cls, data: Any) -> Any:
        """Move unrecognised top-level keys into ``extra_params``.

        A key given both at the top level and inside ``extra_params`` keeps
        the ``extra_params`` value.
        """
        if not isinstance(data, Mapping):
            return data

        known: dict[str, Any] = {}
        passthrough: dict[str, Any] = {}
        for key, value in data.items():
            if key in cls.model_fields:
                known[key] = value
            elif key not in cls._ignored_keys:
                passthrough[key] = value

        explicit = known.get("extra_params") or {}
        if passthrough and isinstance(explicit, Mapping):
            known["extra_params"] = {**passthrough, **explicit}
        return known


class ReadOptions(_OptionsModel):
    """Options recognised by ``get_file_contents``."""

    _ignored_keys: ClassVar[frozenset[str]] = frozenset({"override", "acl"})

    folder: str | None = Field(
        None, description="Filesystem only: subfolder the resource was saved under"
    )
    extra_params: dict[str, Any] = Field(
        default_factory=dict,
        description="Object storage only: passthrough parameters for get_object",
    )

    @field_validator("folder")
    @classmethod
    def empty_folder_is_none(cls, value: str | None) -> str | None:
        return value or None


class SaveOptions(ReadOptions):
    """Options recognised by ``save``, ``save_file`` and ``save_contents``.

    Each backend reads the fields it understands and ignores the rest, so the
    same options object can be handed to either variant. Any other top-level
    key is an object storage request parameter (``ContentType``,
    ``CacheControl``...) and lands in ``extra_params``.
    """

    _ignored_keys: ClassVar[frozenset[str]] = frozenset()

    override: StrictBool = Field(
        True, description="Filesystem only: whether an existing file may be replaced"
    )
    acl: str = Field(
        DEFAULT_CANNED_ACL, description="Object storage only: canned ACL for the object"
    )
