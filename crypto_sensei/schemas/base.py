"""Base Pydantic schemas with strict validation."""
from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model that forbids extra fields and mutation.

    Every pipeline value is produced fresh per analysis request and never
    modified afterwards, so all records derive from this class.

    Usage:
        class MyRecord(StrictBaseModel):
            field: str

    When to use BaseModel instead:
        - Settings/config models that need extra="ignore" for env vars
        - Models parsing external data that may have extra fields
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
