from __future__ import annotations

import sys
from typing import TextIO

from colorama import Fore, Style

from cs2chat.contracts import ChatEvent

SYM_START = "🚀"
SYM_INFO = "ℹ️"
SYM_WARN = "⚠️"
SYM_ERR = "❌"
SYM_CHAT = "💬"
SYM_TRANS = "🌍"


def _paint(text: str, color: str, enabled: bool) -> str:
    if not enabled or not color:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def format_chat_line(event: ChatEvent, *, color: bool = False) -> str:
    team = _paint(f"[{event.team.value}] ", Fore.LIGHTMAGENTA_EX, color)
    sender = _paint(event.sender, Style.BRIGHT, color)
    return f"{_paint(SYM_CHAT, Fore.MAGENTA, color)} {team}{sender}: {event.message}"


def format_translation_line(
    event: ChatEvent,
    language: str,
    target_lang: str,
    text: str,
    *,
    color: bool = False,
) -> str:
    head = f"[{event.team.value}] {event.sender} ({language} → {target_lang.upper()}): "
    return f"{_paint(SYM_TRANS, Fore.LIGHTBLUE_EX, color)} {_paint(head, Fore.LIGHTBLUE_EX, color)}" + _paint(
        text, Fore.LIGHTBLACK_EX, color
    )


class ConsoleSink:
    """Append-only terminal output. Nothing printed here is sent to the game."""

    def __init__(self, stream: TextIO | None = None, *, color: bool = True) -> None:
        self.stream = stream
        self.color = color

    def _write(self, line: str) -> None:
        out = self.stream or sys.stdout
        out.write(line + "\n")
        out.flush()

    def chat(self, event: ChatEvent) -> None:
        self._write(format_chat_line(event, color=self.color))

    def translation(self, event: ChatEvent, language: str, target_lang: str, text: str) -> None:
        self._write(format_translation_line(event, language, target_lang, text, color=self.color))

    def info(self, message: str) -> None:
        self._write(f"{_paint(SYM_INFO, Fore.CYAN, self.color)} {message}")

    def warning(self, message: str) -> None:
        self._write(f"{_paint(SYM_WARN, Fore.YELLOW, self.color)} {_paint(message, Fore.YELLOW, self.color)}")

    def error(self, message: str) -> None:
        self._write(f"{_paint(SYM_ERR, Fore.RED, self.color)} {_paint(message, Fore.RED, self.color)}")

    def plain(self, message: str = "") -> None:
        self._write(message)

    def banner(self, log_path: str, target_lang: str, *, auto_translate: bool = True) -> None:
        self._write(f"{_paint(SYM_START, Fore.CYAN, self.color)} " + _paint(
            "CS2 Chat Auto Translator (watching console.log)", Style.BRIGHT, self.color
        ))
        self._write("")
        self._write(_paint("Configuration:", Fore.LIGHTBLACK_EX, self.color))
        self._write(f"  log_path: {log_path}")
        self._write("")
        self._write(_paint("Behavior:", Fore.LIGHTBLACK_EX, self.color))
        if auto_translate:
            self._write(f"  • All detected chat messages are translated to '{target_lang.upper()}' and printed here.")
        else:
            self._write("  • Translation is off; chat messages are printed as-is.")
        self._write("  • This tool never sends anything back to the game. It is read-only.")
        self._write("")
