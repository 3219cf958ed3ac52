# madrar/utils/messages.py

from typing import Any, Union
import logging

from madrar.config import DEFAULT_LANGUAGE
from madrar.constants import Language
from madrar.errors import MadrarError, StoreError

logger = logging.getLogger(__name__)

TRANSLATIONS = {
    "en": {
        "error.generic": "Something went wrong. Please try again.",
        "error.not_found": "{entity} could not be found.",
        "error.no_recipe": "No recipe is configured for {product}. Add its bill of materials first.",
        "error.insufficient_stock": "Insufficient stock: only {available} of {item} available, but {requested} requested.",
        "error.validation": "Please check the entered values.",
        "error.store": "The data store could not complete the request. Please try again.",
        "error.production_failed": "Failed to record production.",
        "error.sale_failed": "Failed to record sale. Please check all fields and try again.",
        "validation.name_required": "Please fill in the name.",
        "validation.customer_name_required": "Customer name is required.",
        "validation.quantity_positive": "Quantity must be greater than zero.",
        "validation.price_positive": "Sale price must be greater than zero.",
        "validation.amount_non_negative": "{field} cannot be negative.",
        "validation.invalid_number": "{field} must be a number.",
        "validation.invalid_date": "{field} must be a date in the form YYYY-MM-DD.",
        "validation.whole_units": "{field} must be a whole number of units.",
        "validation.invalid_choice": "{value} is not a valid {field}.",
        "validation.duplicate_material": "{material} appears more than once in the recipe.",
        "validation.wrong_person_type": "{name} is not a {person_type}.",
        "validation.stock_field_locked": "Stock can only change through receipts, production, sales or a stock correction.",
        "validation.material_in_use": "{material} is used in a product recipe and cannot be deleted.",
        "validation.product_has_history": "{product} has production or sales history and cannot be deleted.",
        "validation.person_has_history": "{name} has ledger entries and cannot be deleted.",
        "warning.ledger_posting_failed": "Sale recorded successfully, but failed to update customer balance. Please manually adjust {customer}'s balance.",
        "success.production_recorded": "Production recorded successfully",
        "success.sale_recorded": "Sale recorded successfully",
        "success.material_received": "Material received successfully",
        "reset.success": "All business data has been reset.",
        "reset.invalid_password": "Invalid admin password.",
        "reset.failed": "Failed to reset data.",
        "analytics.customer_not_found": "Customer not found",
        "entity.raw_material": "Raw material",
        "entity.product": "Product",
        "entity.person": "Customer or supplier",
        "entity.production_record": "Production record",
        "entity.sale_record": "Sale record",
    },
    "ar": {
        "error.generic": "حدث خطأ ما. يرجى المحاولة مرة أخرى.",
        "error.not_found": "تعذر العثور على {entity}.",
        "error.no_recipe": "لا توجد وصفة للمنتج {product}. أضف مكونات المنتج أولاً.",
        "error.insufficient_stock": "مخزون غير كاف: المتوفر {available} فقط من {item}، والمطلوب {requested}.",
        "error.validation": "يرجى التحقق من القيم المدخلة.",
        "error.store": "تعذر على قاعدة البيانات إكمال الطلب. يرجى المحاولة مرة أخرى.",
        "error.production_failed": "فشل تسجيل الإنتاج.",
        "error.sale_failed": "فشل تسجيل البيع. يرجى التحقق من جميع الحقول والمحاولة مرة أخرى.",
        "validation.name_required": "يرجى ملء الاسم.",
        "validation.customer_name_required": "اسم العميل مطلوب.",
        "validation.quantity_positive": "يجب أن تكون الكمية أكبر من صفر.",
        "validation.price_positive": "يجب أن يكون سعر البيع أكبر من صفر.",
        "validation.amount_non_negative": "لا يمكن أن تكون قيمة {field} سالبة.",
        "validation.invalid_number": "يجب أن تكون قيمة {field} رقماً.",
        "validation.invalid_date": "يجب أن تكون قيمة {field} تاريخاً بالصيغة YYYY-MM-DD.",
        "validation.whole_units": "يجب أن تكون قيمة {field} عدداً صحيحاً من الوحدات.",
        "validation.invalid_choice": "القيمة {value} غير صالحة لـ {field}.",
        "validation.duplicate_material": "المادة {material} مكررة في الوصفة.",
        "validation.wrong_person_type": "{name} ليس {person_type}.",
        "validation.stock_field_locked": "لا يتغير المخزون إلا عبر الاستلام أو الإنتاج أو البيع أو تصحيح المخزون.",
        "validation.material_in_use": "المادة {material} مستخدمة في وصفة منتج ولا يمكن حذفها.",
        "validation.product_has_history": "للمنتج {product} سجل إنتاج أو مبيعات ولا يمكن حذفه.",
        "validation.person_has_history": "لدى {name} قيود في الحساب ولا يمكن حذفه.",
        "warning.ledger_posting_failed": "تم تسجيل البيع بنجاح، لكن فشل تحديث رصيد العميل. يرجى تعديل رصيد {customer} يدوياً.",
        "success.production_recorded": "تم تسجيل الإنتاج بنجاح",
        "success.sale_recorded": "تم تسجيل البيع بنجاح",
        "success.material_received": "تم استلام المادة بنجاح",
        "reset.success": "تمت إعادة تعيين جميع بيانات العمل.",
        "reset.invalid_password": "كلمة مرور المسؤول غير صحيحة.",
        "reset.failed": "فشلت إعادة تعيين البيانات.",
        "analytics.customer_not_found": "العميل غير موجود",
        "entity.raw_material": "المادة الخام",
        "entity.product": "المنتج",
        "entity.person": "العميل أو المورد",
        "entity.production_record": "سجل الإنتاج",
        "entity.sale_record": "سجل البيع",
    },
}

# NotFoundError.entity_name -> catalogue key
ENTITY_KEYS = {
    "RawMaterial": "entity.raw_material",
    "Product": "entity.product",
    "Person": "entity.person",
    "ProductionRecord": "entity.production_record",
    "SaleRecord": "entity.sale_record",
}


def _language_code(language: Union[Language, str, None]) -> str:
    if isinstance(language, Language):
        return language.value
    code = language or DEFAULT_LANGUAGE
    return code if code in TRANSLATIONS else "en"


def translate(key: str, language: Union[Language, str, None] = None, **params: Any) -> str:
    """Returns the catalogue text for key in the given language, falling back to English."""
    catalogue = TRANSLATIONS[_language_code(language)]
    template = catalogue.get(key) or TRANSLATIONS["en"].get(key)
    if template is None:
        logger.warning(f"Missing message key '{key}'.")
        return key
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        logger.warning(f"Missing parameters for message key '{key}': {params}")
        return template


def localize_error(error: BaseException, language: Union[Language, str, None] = None) -> str:
    """Turns an error into the user-facing text; raw store errors never leak through."""
    if isinstance(error, StoreError) or not isinstance(error, MadrarError):
        return translate(StoreError.message_key if isinstance(error, StoreError) else "error.generic", language)

    params = dict(error.params)
    entity = params.get("entity")
    if entity in ENTITY_KEYS:
        params["entity"] = translate(ENTITY_KEYS[entity], language)
    return translate(error.message_key, language, **params)
