"""Shared pydantic base for wire models.

The browser client speaks camelCase (userId, producerId, ...); Python code
uses snake_case attribute names.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Identifiers forwarded to the ledger: trimmed, never empty
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
