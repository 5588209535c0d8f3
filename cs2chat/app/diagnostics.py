from __future__ import annotations


def summarize_exception(detail: str, *, max_len: int = 220) -> str:
    text = str(detail or "").strip()
    if not text:
        return "Unknown runtime error."
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        return "Unknown runtime error."
    for ln in reversed(lines):
        if ln.startswith("File "):
            continue
        if ln.startswith("^"):
            continue
        if ln.startswith("Traceback "):
            continue
        out = ln
        break
    else:
        out = lines[-1]
    if len(out) > max_len:
        return out[: max_len - 3].rstrip() + "..."
    return out


def hint_for_exception(summary: str) -> str:
    s = str(summary or "").lower()
    if "no log_path configured" in s:
        return "Set the console.log location with --set-log-path /path/to/console.log."
    if "console.log not found" in s or "no such file" in s or "filenotfounderror" in s:
        return "Launch CS2 with '-condebug' once so console.log exists, or fix the path via --set-log-path."
    if "permission denied" in s:
        return "console.log is not readable by this user. Check file permissions."
    if "429" in s or "too many requests" in s:
        return "The translation service is rate limiting requests. Wait a bit or switch --translator."
    if "connecterror" in s or "timeout" in s or "name resolution" in s:
        return "The translation service is unreachable. Check the network or use --translator argos."
    if "no module named" in s:
        return "A required package is missing in this virtualenv. Reinstall dependencies and retry."
    if "config file not found" in s:
        return "Configured JSON file is missing. Update the config path or restore the file."
    if "invalid config file" in s:
        return "Fix the JSON syntax in the config file, or delete it and run --init-config."
    return "Check logs for full traceback."
