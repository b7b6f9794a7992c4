from typing import Literal, Optional

from pydantic import BaseModel, Field


class ProductCacheFlush(BaseModel):
    vendor_id: Optional[str] = None
    flush_all: Optional[bool] = Field(default=None, alias="all")


class RestaurantCacheFlush(BaseModel):
    zone_id: Optional[str] = None
    flush_all: Optional[bool] = Field(default=None, alias="all")


class MenuItemsCacheFlush(BaseModel):
    position: Literal["top", "middle", "bottom", "all"] = "all"
    zone_id: Optional[str] = None
    flush_all: Optional[bool] = Field(default=None, alias="all")
