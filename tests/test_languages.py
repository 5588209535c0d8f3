from __future__ import annotations

from cs2chat.nlp.languages import LANG_NAMES, lang_name


def test_lang_name_known_codes() -> None:
    assert lang_name("ru") == "Russian"
    assert lang_name("EN") == "English"
    assert lang_name("zh-CN") == "Chinese (Simplified)"


def test_lang_name_unknown_and_empty() -> None:
    assert lang_name("xx") == "XX"
    assert lang_name("unknown") == "UNKNOWN"
    assert lang_name("") == "UNKNOWN"
    assert lang_name(None) == "UNKNOWN"


def test_lang_table_keys_are_lowercase() -> None:
    assert all(key == key.lower() for key in LANG_NAMES)
    assert len(LANG_NAMES) >= 100
