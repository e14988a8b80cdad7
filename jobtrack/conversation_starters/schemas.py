from pydantic import BaseModel, Field, field_validator


class GenerateConversationStarterRequest(BaseModel):
    prospect_details: str = Field(..., min_length=20, max_length=2000)
    additional_context: str | None = Field(None, max_length=1200)

    @field_validator("prospect_details", mode="before")
    @classmethod
    def strip_details(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("additional_context", mode="before")
    @classmethod
    def blank_context_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class GenerateConversationStarterResponse(BaseModel):
    message: str
    success: bool = True
