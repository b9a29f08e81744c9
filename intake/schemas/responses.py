# intake/schemas/responses.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LeadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    error: Optional[str] = None
    field_errors: Optional[Dict[str, List[str]]] = Field(default=None, alias="fieldErrors")

    def body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
