from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[str, int, float, bool, None]


class SettingsDocument(BaseModel):
    """Stored settings documents keep keys we do not model."""

    model_config = ConfigDict(extra="allow")


class GlobalSettings(SettingsDocument):
    appLogo: Scalar = ""
    meta_title: Scalar = "Jippy Mart"
    applicationName: Scalar = "Jippy Mart"
    web_panel_color: Scalar = "#FF683A"
    order_ringtone_url: Scalar = ""


class RestaurantNearBy(SettingsDocument):
    distanceType: Scalar = "km"
    radios: Scalar = "15"
    driverRadios: Scalar = "5"


class DriverNearBy(SettingsDocument):
    driverRadios: Scalar = "5"
    mapType: Scalar = "inappmap"
    selectedMapType: Scalar = "google"


class VersionSettings(SettingsDocument):
    web_version: Scalar = "2.5.0"
    app_version: Scalar = "2.5.0"


class AdminCommissionSettings(SettingsDocument):
    isEnabled: Scalar = False
    commissionType: Scalar = "Percent"
    fix_commission: Scalar = 0


class Language(SettingsDocument):
    title: str = "English"
    slug: str = "en"
    isActive: bool = True
    is_rtl: bool = False


class LanguagesSettings(SettingsDocument):
    list: List[Language] = Field(default_factory=lambda: [Language()])


class GoogleMapKey(SettingsDocument):
    key: Scalar = ""
    placeHolderImage: Optional[Scalar] = None


class DeliveryChargeSettings(SettingsDocument):
    pass


DOCUMENT_SCHEMAS = {
    "globalSettings": GlobalSettings,
    "RestaurantNearBy": RestaurantNearBy,
    "DriverNearBy": DriverNearBy,
    "Version": VersionSettings,
    "AdminCommission": AdminCommissionSettings,
    "languages": LanguagesSettings,
    "googleMapKey": GoogleMapKey,
    "DeliveryCharge": DeliveryChargeSettings,
}


class SettingsFieldUpdate(BaseModel):
    value: Any = None


class SettingsDocumentUpdate(BaseModel):
    fields: dict
