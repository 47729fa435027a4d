from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any
from decimal import Decimal
from app.models.venue import VenueStatus


class VenueBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=1, description="Maximum capacity")
    pricePerHour: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    pricePerDay: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="ISO 4217 code")
    status: VenueStatus = VenueStatus.ACTIVE


class VenueCreate(VenueBase):
    
    @validator('name', 'address', 'city')
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Must not be blank')
        return v


# Fields an update may explicitly clear with null
NULLABLE_FIELDS = frozenset({"description", "pricePerHour", "pricePerDay"})


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=1)
    pricePerHour: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    pricePerDay: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[VenueStatus] = None
    
    def to_fields(self) -> dict:
        """Fields the caller actually sent, keyed by model attribute name."""
        names = {
            "pricePerHour": "price_per_hour",
            "pricePerDay": "price_per_day",
        }
        return {
            names.get(key, key): value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }


class VenueResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    address: str
    city: str
    capacity: int
    pricePerHour: Optional[str] = None
    pricePerDay: Optional[str] = None
    currency: str
    status: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    
    class Config:
        from_attributes = True


class VenueDetailResponse(BaseModel):
    success: bool = True
    venue: VenueResponse


class VenuesResponse(BaseModel):
    success: bool = True
    venues: List[VenueResponse]


class VenueStatistics(BaseModel):
    success: bool = True
    total: int
    byStatus: Dict[str, int] = {}
    topCities: List[Dict[str, Any]] = []
