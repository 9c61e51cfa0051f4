from pydantic import BaseModel, ConfigDict, Field


class GenerateImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="Text description of the logo to render.")


class GenerateImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_b64: str = Field(..., alias="imageB64", description="Base64-encoded PNG.")


class ErrorResponse(BaseModel):
    error: str
