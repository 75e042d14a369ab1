"""可选语言列表."""

from typing import Dict, List

from models.models import Language

LANGUAGES: List[Language] = [
    Language(code="en", name="English"),
    Language(code="es", name="Spanish"),
    Language(code="fr", name="French"),
    Language(code="de", name="German"),
    Language(code="it", name="Italian"),
    Language(code="pt", name="Portuguese"),
    Language(code="ja", name="Japanese"),
    Language(code="ko", name="Korean"),
    Language(code="zh", name="Chinese"),
    Language(code="ru", name="Russian"),
    Language(code="ar", name="Arabic"),
    Language(code="hi", name="Hindi"),
]

_NAMES: Dict[str, str] = {lang.code: lang.name for lang in LANGUAGES}


def language_name(code: str) -> str:
    """根据语言代码返回语言名称，未知代码原样返回."""
    return _NAMES.get(code) or code
