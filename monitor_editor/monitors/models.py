from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional, Union
from enum import Enum
import json


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


# Methods offered by the method selector
SELECTABLE_METHODS = [HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE, HttpMethod.HEAD]

# Methods whose request body is shown and submitted
BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})


class MonitorRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[Union[int, str]] = None
    name: str
    url: str
    method: HttpMethod = HttpMethod.GET
    interval: int
    timeout: int
    expected_status: int = Field(validation_alias=AliasChoices("expected_status", "expectedStatus"))
    # map, JSON-encoded string or list of {key, value}; decoded by monitors.headers
    headers: Any = None
    body: Optional[str] = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("body", mode="before")
    @classmethod
    def stringify_body(cls, v):
        # stores may hand back a JSON body already parsed
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v) if isinstance(v, (dict, list, bool)) else str(v)


class FetchMonitorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    monitor: Optional[Dict[str, Any]] = None
    message: Optional[str] = None


class UpdateMonitorPayload(BaseModel):
    name: str
    url: str
    method: HttpMethod
    interval: int
    timeout: int
    expected_status: int = Field(serialization_alias="expectedStatus")
    headers: Dict[str, str]
    body: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        # body is left out entirely when the method does not carry one
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UpdateMonitorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    message: Optional[str] = None
