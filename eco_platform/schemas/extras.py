from typing import List

from pydantic import BaseModel, Field

from eco_engine.carbon import MAX_ENERGY_KWH, MAX_MEAT_MEALS, MAX_TRANSPORT_KM


class CarbonRequest(BaseModel):
    transport_km: float = Field(0.0, ge=0, le=MAX_TRANSPORT_KM, description="Kilometres driven per day")
    energy_kwh: float = Field(0.0, ge=0, le=MAX_ENERGY_KWH, description="Electricity used per day")
    meat_meals: float = Field(0.0, ge=0, le=MAX_MEAT_MEALS, description="Meals with meat per day")


class CarbonResponse(BaseModel):
    kg_co2_per_day: float = Field(ge=0)
    tips: List[str]


class NewsItemModel(BaseModel):
    title: str
    pub_date: str
    link: str


class NewsResponse(BaseModel):
    items: List[NewsItemModel]
