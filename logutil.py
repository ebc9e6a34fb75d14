import os
import threading
import config

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}

_structure_tag = None


def set_structure(tag):
    """Tag subsequent log lines with the structure currently being generated."""
    global _structure_tag
    _structure_tag = tag


def enabled(level):
    threshold = _LEVELS.get(str(getattr(config, "LOG_LEVEL", "INFO")).upper(), 20)
    return _LEVELS.get(level.upper(), 20) >= threshold


def log(scope, msg, level="INFO"):
    if not enabled(level):
        return
    if scope == "STRUCTURE" and not getattr(config, "LOG_STRUCTURES", True):
        return
    pid = os.getpid()
    thread = threading.current_thread().name
    tag = _structure_tag
    struct_tag = f" {tag}" if tag is not None else ""
    text = f"[{level}{struct_tag} pid{pid} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level in ("WARN", "WARNING"):
            text = f"\x1b[33m{text}\x1b[0m"
        elif level == "ERROR":
            text = f"\x1b[31m{text}\x1b[0m"
        elif level == "DEBUG":
            text = f"\x1b[2m{text}\x1b[0m"
    print(text)
