from typing import Literal, Optional

from pydantic import BaseModel, confloat, constr

Latitude = confloat(ge=-90, le=90)
Longitude = confloat(ge=-180, le=180)
SortFilter = Literal["distance", "rating"]


class NearestRestaurantsQuery(BaseModel):
    zone_id: str
    latitude: Latitude
    longitude: Longitude
    radius: Optional[confloat(ge=0)] = None
    is_dining: bool = False
    user_id: Optional[str] = None
    filter: SortFilter = "distance"
    refresh: bool = False


class RestaurantSearchQuery(BaseModel):
    query: constr(strip_whitespace=True, min_length=2)
    zone_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class CategoryNearestQuery(BaseModel):
    latitude: Latitude
    longitude: Longitude
    radius: Optional[confloat(ge=0)] = None
    filter: SortFilter = "distance"


class ProductListQuery(BaseModel):
    page: int = 1
    per_page: int = 50


class BannerQuery(BaseModel):
    zone_id: Optional[str] = None
    position: Optional[Literal["top", "middle", "bottom"]] = None
    refresh: bool = False
