from pathlib import PurePath

DEFAULT_LANGUAGE = "txt"


def language_from_filename(file_name: str) -> str:
    """
    Return the language tag for a file: its extension without the dot.

    Files without an extension (eg, Makefile) fall back to "txt".
    """
    suffix = PurePath(file_name).suffix
    return suffix[1:] if suffix else DEFAULT_LANGUAGE
