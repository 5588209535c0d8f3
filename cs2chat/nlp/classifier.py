# cs2chat/nlp/classifier.py
from __future__ import annotations
import re
from typing import Optional

from cs2chat.contracts import ChatEvent, Team

# "10/26 18:49:20  [CT] PlayerName: hello" -> team, sender, message
_CHAT_LINE = re.compile(r"\[(CT|T|ALL)\]\s+([^:]+?): (.+)")


def classify(raw_line: str, source_offset: int = 0) -> Optional[ChatEvent]:
    m = _CHAT_LINE.search(raw_line or "")
    if m is None:
        return None

    sender = m.group(2).strip()
    message = m.group(3).strip()
    if not sender or not message:
        return None

    return ChatEvent(
        team=Team(m.group(1)),
        sender=sender,
        message=message,
        source_offset=int(source_offset),
    )
