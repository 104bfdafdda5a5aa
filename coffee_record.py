"""The structured record produced by one extraction."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


RECORD_FIELDS = ("price", "weight", "flavor", "processing", "farmer")


class CoffeeRecord(BaseModel):
    # Values are kept exactly as the model returned them; unknown keys pass through.
    model_config = ConfigDict(extra="allow")

    price: Optional[Any] = None
    weight: Optional[Any] = None
    flavor: Optional[Any] = None
    processing: Optional[Any] = None
    farmer: Optional[Any] = None

    @classmethod
    def from_parsed(cls, data: Dict[str, Any]) -> "CoffeeRecord":
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def known_fields(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in RECORD_FIELDS}
