# madrar/business_logic/entities/base_entity.py
from dataclasses import dataclass, field
from typing import Optional, Union

from madrar.constants import Language


@dataclass
class BaseEntity:
    id: Optional[str] = field(default=None, kw_only=True)  # opaque id assigned by the repository on insert


class LocalizedNameMixin:
    """For entities with a default ``name`` and a ``name_translations`` map keyed by language code."""

    def display_name(self, language: Union[Language, str, None] = None) -> str:
        code = language.value if isinstance(language, Language) else language
        if code:
            translated = (getattr(self, "name_translations", None) or {}).get(code)
            if translated:
                return translated
        return getattr(self, "name")
