from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SurveyModel(BaseModel):
    """Base común para todas las entidades del levantamiento"""

    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convierte la entidad a diccionario para serialización"""
        return self.model_dump(mode="json", by_alias=True)
