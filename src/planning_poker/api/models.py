"""Pydantic models for session request payloads."""

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body accepting camelCase keys from clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSessionRequest(CamelModel):
    """Body for creating a session."""

    nickname: str
    name: str | None = None


class SubmitEstimateRequest(CamelModel):
    """Body for submitting an estimate."""

    nickname: str
    value: StrictInt | StrictFloat


class RevealRequest(CamelModel):
    """Body for showing or hiding estimates."""

    is_revealed: StrictBool | None = None
    owner_token: str | None = None


class FinalizeRequest(CamelModel):
    """Body for finalizing a session."""

    final_estimate: StrictInt | StrictFloat
    owner_token: str | None = None
