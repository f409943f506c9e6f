"""Very lightweight heuristic detection of the language a dish name is written in."""
import re

# Script ranges, checked first; kana before CJK since Japanese also uses kanji
_SCRIPTS = (
    ("ja", re.compile(r"[぀-ゟ゠-ヿ]")),
    ("zh", re.compile(r"[一-鿿]")),
    ("ko", re.compile(r"[가-힯ᄀ-ᇿ]")),
    ("ar", re.compile(r"[؀-ۿݐ-ݿ]")),
    ("he", re.compile(r"[֐-׿]")),
    ("ru", re.compile(r"[Ѐ-ӿ]")),
    ("hi", re.compile(r"[ऀ-ॿ]")),
    ("th", re.compile(r"[฀-๿]")),
    ("el", re.compile(r"[Ͱ-Ͽ]")),
)

# Letters only Vietnamese uses among Latin scripts
_VIETNAMESE = re.compile(r"[ăắằẳẵặơờớởỡợưừứửữựđạảấầẩẫậẹẻẽếềểễệỉịọỏốồổỗộụủỳỵỷỹ]", re.IGNORECASE)


def _words(*words: str) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(words) + r")\b", re.IGNORECASE)


# (language, distinctive letters, common function words), in precedence order
_LATIN = (
    ("fr", re.compile(r"[àâæçèéêëîïôœùûÿ]", re.IGNORECASE),
     _words("du", "de", "la", "le", "les", "au", "aux", "avec", "sur", "dans", "pour", "et", "chez", "sous")),
    ("es", re.compile(r"[ñáéíóúü]", re.IGNORECASE),
     _words("con", "del", "de", "la", "el", "los", "las", "y", "en", "al", "por", "para")),
    ("pt", re.compile(r"[ãõç]", re.IGNORECASE),
     _words("com", "do", "da", "dos", "das", "no", "na", "nos", "nas", "em")),
    ("it", None,
     _words("alla", "con", "di", "al", "del", "della", "dello", "degli", "delle", "nel", "nella")),
    ("de", re.compile(r"[äöüß]", re.IGNORECASE),
     _words("mit", "und", "der", "die", "das", "von", "zu", "im", "am", "auf", "für", "bei")),
    ("nl", None,
     _words("met", "van", "het", "een", "op", "aan", "voor", "bij", "door")),
    ("sv", re.compile(r"[åøæ]", re.IGNORECASE),
     _words("med", "och", "på", "av", "för", "till", "från")),
    ("pl", re.compile(r"[ąćęłńśźż]", re.IGNORECASE),
     _words("z", "w", "na", "od", "dla", "przez", "przy", "pod")),
    ("tr", re.compile(r"[ğış]", re.IGNORECASE),
     _words("ile", "ve", "bu", "bir", "için", "gibi")),
)


def detect_menu_language(text: str) -> str:
    """
    Detect the language a dish name is written in.
    
    Args:
        text: Dish name as printed on the menu
        
    Returns:
        Language code - defaults to 'en'
    """
    if not text or not text.strip():
        return "en"
    
    for code, pattern in _SCRIPTS:
        if pattern.search(text):
            return code
    
    if _VIETNAMESE.search(text):
        return "vi"
    
    for code, letters, words in _LATIN:
        if (letters is not None and letters.search(text)) or words.search(text):
            return code
    
    return "en"
