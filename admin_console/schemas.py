from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImpersonateForm(BaseModel):
    """Body of POST /api/starter/impersonate. Missing fields become ''."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    organization_id: str = Field(default="", alias="organizationId")
    return_to: str = Field(default="", alias="returnTo")

    @field_validator("organization_id", "return_to", mode="before")
    @classmethod
    def strip(cls, value):
        return value.strip() if isinstance(value, str) else ""
