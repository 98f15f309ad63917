# fertilizer_ordering/models/fertilizer_models.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class FertilizerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    ratePerHectare: float = Field(..., gt=0, allow_inf_nan=False)
    unit: str = "kg"
    description: str = ""

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class FertilizerUpdateRequest(BaseModel):
    ratePerHectare: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    description: Optional[str] = None
    isActive: Optional[bool] = None
