from __future__ import annotations

import asyncio
import traceback
from pathlib import Path

from colorama import just_fix_windows_console

from cs2chat.app.config import StartupError, get_log_path, init_config, resolve_args, set_log_path
from cs2chat.app.diagnostics import hint_for_exception, summarize_exception
from cs2chat.app.logging_setup import setup_app_logger
from cs2chat.app.runtime import run_watch
from cs2chat.live.watchers import WATCH_MODES
from cs2chat.nlp.translator.factory import PROVIDERS
from cs2chat.ui.console import ConsoleSink


def main(argv: list[str] | None = None) -> int:
    just_fix_windows_console()
    try:
        args = resolve_args(argv)
    except SystemExit as e:
        # argparse exits with int codes; config loading exits with a message
        if not isinstance(e.code, str):
            raise
        sink = ConsoleSink(color=False)
        sink.error(e.code)
        sink.plain(hint_for_exception(e.code))
        return 1
    sink = ConsoleSink(color=bool(args.color))

    if args.init_config:
        path, values = init_config(config_path=args.config)
        sink.info("Config initialized/updated:")
        sink.plain(f"  {path}")
        sink.plain("Effective values:")
        for key, value in values.items():
            sink.plain(f"  {key}: {value}")
        return 0

    if args.set_log_path:
        path, resolved = set_log_path(args.set_log_path, config_path=args.config)
        sink.info("Config updated (log_path):")
        sink.plain(f"  {path}")
        sink.plain(f"  log_path: {resolved}")
        return 0

    logger, _, log_path = setup_app_logger()
    logger.info("app_start", extra={"config_path": str(args.config or ""), "argv": argv or []})

    try:
        console_log = get_log_path(args)
        if not Path(console_log).is_file():
            raise StartupError(f"console.log not found: {console_log}")
    except StartupError as e:
        logger.error("startup_failed", extra={"detail": str(e)})
        sink.error(str(e))
        sink.plain(hint_for_exception(str(e)))
        sink.plain("You can fix it via:")
        sink.plain("  cs2-chat-translator --set-log-path /path/or/drive/to/console.log")
        return 1
    args.log_path = console_log

    if str(args.translator).lower().strip() not in PROVIDERS:
        logger.error("startup_failed", extra={"detail": f"unknown translator {args.translator}"})
        sink.error(f"Unknown translator provider: {args.translator} (choose from {', '.join(PROVIDERS)})")
        return 2

    if str(args.watch_mode).lower().strip() not in WATCH_MODES:
        logger.error("startup_failed", extra={"detail": f"unknown watch mode {args.watch_mode}"})
        sink.error(f"Unknown watch mode: {args.watch_mode} (choose from {', '.join(WATCH_MODES)})")
        return 2

    sink.banner(console_log, str(args.target_lang), auto_translate=bool(args.auto_translate))
    try:
        asyncio.run(run_watch(args, sink, logger=logger))
    except KeyboardInterrupt:
        logger.info("watch_interrupted")
        sink.plain()
        sink.info("Stopped.")
        return 0
    except FileNotFoundError as e:
        logger.error("startup_failed", extra={"detail": str(e)})
        sink.error(f"console.log not found: {console_log}")
        sink.plain(hint_for_exception(f"{type(e).__name__}: {e}"))
        return 1
    except Exception:
        detail = traceback.format_exc()
        logger.exception("runtime_crash")
        summary = summarize_exception(detail)
        sink.error(f"Fatal error: {summary}")
        sink.plain(hint_for_exception(summary))
        sink.plain(f"Log: {log_path}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
