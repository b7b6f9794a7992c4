"""Settings documents: typed access, mobile bootstrap payload, admin edits."""
import logging

from flask import g
from pydantic import ValidationError

from app.cache.bootstrap import get_cache
from app.cache.invalidation import flush_settings_documents
from app.schemas.settings import DOCUMENT_SCHEMAS, Language
from app.utils.coerce import coerce_boolean
from models.setting import Currency, Setting, VendorAttribute

logger = logging.getLogger(__name__)

MOBILE_DOCUMENTS = (
    "restaurant", "RestaurantNearBy", "DriverNearBy", "globalSettings", "googleMapKey",
    "notification_setting", "privacyPolicy", "termsAndConditions", "walletSettings",
    "WalletSetting", "Version", "story", "referral_amount", "placeHolderImage",
    "emailSetting", "specialDiscountOffer", "DineinForRestaurant", "AdminCommission",
    "DeliveryCharge", "martDeliveryCharge", "PriceSettings", "payment", "languages",
    "digitalProduct", "driver_total_charges", "CODSettings",
)

DEFAULT_CURRENCY = {
    "symbol": "₹",
    "code": "INR",
    "name": "Indian Rupee",
    "symbolAtRight": False,
    "decimal_digits": 2,
}


class SettingsStore:
    """Reads every settings document once and decodes it once.

    ``refresh()`` discards what was read so the next access hits the database.
    """

    def __init__(self):
        self._documents = None

    def load(self):
        if self._documents is None:
            self._documents = {row.document_name: row.decoded_fields() for row in Setting.query.all()}
        return self

    def refresh(self):
        self._documents = None
        return self.load()

    def has(self, name) -> bool:
        return name in self.load()._documents

    def raw(self, name) -> dict:
        return dict(self.load()._documents.get(name) or {})

    def typed(self, name):
        schema = DOCUMENT_SCHEMAS.get(name)
        if schema is None:
            raise KeyError(name)
        try:
            return schema(**self.raw(name))
        except ValidationError as e:
            logger.warning("Settings document %s failed validation, using defaults: %s", name, e)
            return schema()

    def document(self, name) -> dict:
        """Typed documents come back with their defaults filled in."""
        if name in DOCUMENT_SCHEMAS:
            return self.typed(name).model_dump()
        return self.raw(name)

    def documents(self, names) -> dict:
        return {name: self.raw(name) for name in names if self.has(name)}


def get_settings_store() -> SettingsStore:
    store = getattr(g, "settings_store", None)
    if store is None:
        store = SettingsStore()
        g.settings_store = store
    return store


def resolve_currency() -> dict:
    currency = Currency.query.filter(Currency.is_active.is_(True)).first()
    if currency is None:
        return dict(DEFAULT_CURRENCY)
    return {
        "symbol": currency.symbol or DEFAULT_CURRENCY["symbol"],
        "code": currency.code or DEFAULT_CURRENCY["code"],
        "name": currency.name or DEFAULT_CURRENCY["name"],
        "symbolAtRight": bool(currency.symbol_at_right),
        "decimal_digits": int(currency.decimal_digits if currency.decimal_digits is not None else 2),
    }


def languages(store=None) -> list:
    store = store or get_settings_store()
    langs = store.typed("languages").list
    return [lang.model_dump() for lang in langs] or [Language().model_dump()]


def map_settings(store=None) -> dict:
    store = store or get_settings_store()
    data = {}
    if store.has("DriverNearBy"):
        data["selectedMapType"] = store.typed("DriverNearBy").selectedMapType
    if store.has("googleMapKey"):
        data["googleMapKey"] = store.typed("googleMapKey").key
    return data


def all_settings(store=None) -> dict:
    store = store or get_settings_store()
    return {
        "globalSettings": store.document("globalSettings"),
        "distanceSettings": store.document("RestaurantNearBy"),
        "languages": languages(store),
        "version": store.document("Version"),
        "mapSettings": map_settings(store),
        "notificationSettings": store.raw("notification_setting"),
        "currency": resolve_currency(),
    }


def _flag(value) -> bool:
    return bool(coerce_boolean(value))


def mobile_settings(store=None) -> dict:
    store = store or get_settings_store()
    documents = store.documents(MOBILE_DOCUMENTS)

    def doc(name):
        return documents.get(name) or {}

    restaurant = doc("restaurant")
    near_by = doc("RestaurantNearBy")
    driver_near_by = doc("DriverNearBy")
    global_settings = doc("globalSettings")
    map_key = doc("googleMapKey")
    notification = doc("notification_setting")
    version = doc("Version")
    place_holder = doc("placeHolderImage")
    wallet = doc("walletSettings") or doc("WalletSetting")

    derived = {
        "isSubscriptionModelApplied": _flag(restaurant.get("subscription_model")),
        "autoApproveRestaurant": _flag(restaurant.get("auto_approve_restaurant")),
        "radius": near_by.get("radios"),
        "driverRadios": driver_near_by.get("driverRadios"),
        "distanceType": near_by.get("distanceType"),
        "isEnableAdsFeature": _flag(global_settings.get("isEnableAdsFeature")),
        "isSelfDeliveryFeature": _flag(global_settings.get("isSelfDelivery")),
        "themeColors": {
            "app_customer_color": global_settings.get("app_customer_color"),
            "app_driver_color": global_settings.get("app_driver_color"),
            "app_restaurant_color": global_settings.get("app_restaurant_color"),
        },
        "mapAPIKey": map_key.get("key", ""),
        "placeHolderImage": map_key.get("placeHolderImage") or place_holder.get("image", ""),
        "senderId": notification.get("projectId", ""),
        "jsonNotificationFileURL": notification.get("serviceJson", ""),
        "selectedMapType": driver_near_by.get("selectedMapType"),
        "mapType": driver_near_by.get("mapType"),
        "privacyPolicy": doc("privacyPolicy").get("privacy_policy", ""),
        "termsAndConditions": doc("termsAndConditions").get("termsAndConditions", ""),
        "walletEnabled": _flag(wallet.get("isEnabled")),
        "googlePlayLink": version.get("googlePlayLink", ""),
        "appStoreLink": version.get("appStoreLink", ""),
        "appVersion": version.get("app_version", ""),
        "websiteUrl": version.get("websiteUrl", ""),
        "storyEnable": _flag(doc("story").get("isEnabled")),
        "referralAmount": doc("referral_amount").get("referralAmount", "0"),
        "placeholderImage": place_holder.get("image", ""),
        "specialDiscountOffer": _flag(doc("specialDiscountOffer").get("isEnable")),
        "isEnabledForCustomer": _flag(doc("DineinForRestaurant").get("isEnabledForCustomer")),
        "adminCommission": doc("AdminCommission"),
        "mailSettings": doc("emailSetting"),
        "currency": resolve_currency(),
    }
    return {"success": True, "data": {"documents": documents, "derived": derived}}


def delivery_charge_settings(store=None) -> dict:
    store = store or get_settings_store()
    if not store.has("DeliveryCharge"):
        logger.info("No DeliveryCharge settings found, using empty payload")
    return {"success": True, "data": store.raw("DeliveryCharge")}


def vendor_attributes() -> list:
    return [a.to_dict() for a in VendorAttribute.query.order_by(VendorAttribute.title).all()]


def get_document(name):
    record = Setting.find(name)
    return record.decoded_fields() if record else None


def replace_document(name, fields: dict) -> dict:
    Setting.update_by_document(name, fields)
    _after_write()
    return fields


def update_field(name, field, value) -> dict:
    record = Setting.set_field(name, field, value)
    _after_write()
    return record.decoded_fields()


def _after_write():
    flush_settings_documents(get_cache())
    g.pop("settings_store", None)


def seed_default_documents() -> list:
    """Write schema defaults for every typed document that does not exist yet."""
    created = []
    for name, schema in DOCUMENT_SCHEMAS.items():
        if Setting.find(name) is None:
            Setting.update_by_document(name, schema().model_dump())
            created.append(name)
    return created
