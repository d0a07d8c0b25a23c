from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .models import SubstitutionSchedule


class ParseRequest(BaseModel):
    """
    Request body for the parse endpoint.
    """
    api: str = Field(..., description="Key of the site adapter, e.g. 'untis-monitor'.")
    data: Dict[str, Any] = Field(..., description="The schedule configuration (columns, classInExtraLine, ...).")
    html: str = Field(..., description="The fetched HTML page.")
    default_class: Optional[str] = Field(None, alias="defaultClass", description="Class of per-class pages without a class column.")

    class Config:
        populate_by_name = True


class ParseResponse(BaseModel):
    """
    Response body of the parse endpoint.
    """
    schedule: SubstitutionSchedule = Field(..., description="The parsed days with their substitutions and messages.")
    parsed_at: datetime = Field(..., alias="parsedAt", description="Timestamp of when the page was parsed.")

    class Config:
        populate_by_name = True


class ParserListResponse(BaseModel):
    parsers: List[str] = Field(..., description="Keys of the registered site adapters.")
