"""
Shared pydantic base classes.

Python attributes are snake_case; the wire format (reports produced
upstream, payloads stored by the metrics store) is camelCase. Both spellings
are accepted on input, camelCase is emitted with ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Mutable model serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self):
        return self.model_dump(by_alias=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant used for report inputs."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
