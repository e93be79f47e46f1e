"""
Base model for entities and commands exchanged with the outside world

Python code uses snake_case attributes; the JSON API speaks camelCase
(``spentAmount``, ``createdBy``). Both spellings are accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Pydantic base with camelCase aliases and by-name population"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        """JSON-safe dict with camelCase keys, as returned by the HTTP API"""
        return self.model_dump(mode="json", by_alias=True)
