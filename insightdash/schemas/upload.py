from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any


class ParsedDatasetResponse(BaseModel):
    filename: str
    file_type: str
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
