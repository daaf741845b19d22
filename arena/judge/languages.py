from enum import Enum

from arena.judge.errors import UnsupportedLanguageError


class Language(str, Enum):
    C = "c"
    CPP = "cpp"
    JAVA = "java"
    PYTHON = "python"


# Must match the judge deployment's language table exactly
JUDGE_LANGUAGE_IDS = {
    Language.C: 50,
    Language.CPP: 54,
    Language.JAVA: 62,
    Language.PYTHON: 71,
}


def resolve_language_id(language) -> int:
    """Map a language name (or Language) to the judge's numeric id."""
    try:
        key = Language(str(getattr(language, "value", language)).lower())
    except ValueError:
        raise UnsupportedLanguageError(f"Language {language} not supported")
    return JUDGE_LANGUAGE_IDS[key]
