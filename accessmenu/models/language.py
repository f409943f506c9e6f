"""
Display languages and localized-text lookup.
"""

from enum import Enum
from typing import Mapping, Optional, Union


class Language(str, Enum):
    """Display languages offered to diners"""
    ENGLISH = "en"
    CHINESE = "zh"
    SPANISH = "es"
    FRENCH = "fr"
    
    # Alias of ENGLISH; every localized map carries this entry
    BASE = "en"
    
    @classmethod
    def parse(cls, code: Optional[Union[str, "Language"]]) -> "Language":
        """Resolve a language code, falling back to the base language."""
        if isinstance(code, Language):
            return code
        if not code:
            return cls.BASE
        normalized = code.strip().lower().replace("_", "-").split("-")[0]
        try:
            return cls(normalized)
        except ValueError:
            return cls.BASE
    
    @classmethod
    def is_supported(cls, code: str) -> bool:
        return code.strip().lower() in {lang.value for lang in cls}


def localize(mapping: Optional[Mapping[str, str]], language: Union[str, Language]) -> str:
    """
    Look up a localized string.
    
    Returns the entry for ``language``, then the base-language entry,
    then an empty string.
    """
    if not mapping:
        return ""
    lang = Language.parse(language)
    value = mapping.get(lang.value)
    if value:
        return value
    return mapping.get(Language.BASE.value, "") or ""
