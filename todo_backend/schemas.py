from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from todo_backend.models import UPDATABLE_FIELDS


class TodoCreate(BaseModel):
    # title stays optional so a missing one is answered with our own 400
    title: Optional[str] = None
    priority: Optional[int] = 0


class TodoUpdate(BaseModel):
    title: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[int] = None

    def supplied(self) -> Dict[str, Any]:
        """Return the fields present in the request, in SET-clause order.

        A field counts as supplied whenever it appears in the body, null
        included. ``completed`` is coerced to 0/1 and a null ``priority``
        becomes 0; a null ``title`` is passed through for the caller to
        reject.
        """
        values = {}
        for name in UPDATABLE_FIELDS:
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if name == "completed":
                value = 1 if value else 0
            elif name == "priority" and value is None:
                value = 0
            values[name] = value
        return values


class TodoRead(BaseModel):
    id: int
    title: str
    completed: int = 0
    priority: int = 0

    model_config = ConfigDict(from_attributes=True)

    @field_validator("completed", mode="before")
    @classmethod
    def as_flag(cls, v):
        if v is None:
            return 0
        return 1 if v else 0

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v):
        return 0 if v is None else v


class ChangeResult(BaseModel):
    message: str
    changes: int


class ErrorBody(BaseModel):
    error: str
