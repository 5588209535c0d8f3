from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class Team(str, Enum):
    CT = "CT"
    T = "T"
    ALL = "ALL"


@dataclass(frozen=True)
class ChatEvent:
    team: Team
    sender: str
    message: str
    source_offset: int = 0  # byte offset of the line start in console.log


class LogLine(NamedTuple):
    text: str
    offset: int


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    target_lang: str = "en"
    # None = let the provider detect the source language
    source_lang: Optional[str] = None


@dataclass(frozen=True)
class TranslationResult:
    text: str
    detected_language: str = "unknown"
    forced_language: Optional[str] = None
    provider: str = ""
    # set when the provider failed and text is the untranslated original
    failed: bool = False

    @property
    def effective_language(self) -> str:
        return (self.forced_language or self.detected_language or "unknown").lower()
