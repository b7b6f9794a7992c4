from typing import Literal, Optional

from pydantic import BaseModel, confloat, conint, constr

Term = constr(strip_whitespace=True, max_length=100)


class UnifiedSearchQuery(BaseModel):
    query: constr(strip_whitespace=True, min_length=2)
    zone_id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    limit: conint(ge=1, le=100) = 20
    page: conint(ge=1) = 1


class MartCategorySearchQuery(BaseModel):
    q: Term = ""
    page: conint(ge=1, le=100) = 1
    limit: conint(ge=1, le=50) = 20


class MartItemSearchQuery(BaseModel):
    search: Optional[Term] = None
    category: Optional[Term] = None
    subcategory: Optional[Term] = None
    vendor: Optional[Term] = None
    min_price: Optional[confloat(ge=0)] = None
    max_price: Optional[confloat(ge=0)] = None
    veg: Optional[bool] = None
    isAvailable: Optional[bool] = None
    isBestSeller: Optional[bool] = None
    isFeature: Optional[bool] = None
    page: conint(ge=1) = 1
    limit: conint(ge=1, le=100) = 20

    def filters(self) -> dict:
        return self.model_dump(exclude={"page", "limit"})


class FeaturedMartItemsQuery(BaseModel):
    type: Literal["best_seller", "trending", "featured", "new", "spotlight"] = "featured"
    limit: conint(ge=1, le=50) = 20
