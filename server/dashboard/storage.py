"""
In-memory storage for wizard sessions.
Each wizard session (one browser tab, or one browser session when the tab id
is not sent) owns a private string -> string map. Nothing here survives a
process restart.
"""
import time
from typing import Dict


# Wizard state: session_id -> {key: serialized value}
wizard_sessions_db: Dict[str, Dict[str, str]] = {}

# Last access per session: session_id -> epoch seconds
wizard_session_seen_db: Dict[str, float] = {}


def session_values(session_id: str) -> Dict[str, str]:
    """Return (creating if needed) the value map of a session and mark it used."""
    wizard_session_seen_db[session_id] = time.time()
    return wizard_sessions_db.setdefault(session_id, {})


def prune_idle_sessions(max_idle_seconds: float) -> int:
    """Drop sessions not touched for max_idle_seconds. Returns how many went."""
    cutoff = time.time() - max_idle_seconds
    stale = [sid for sid, seen in wizard_session_seen_db.items() if seen < cutoff]
    for sid in stale:
        wizard_session_seen_db.pop(sid, None)
        wizard_sessions_db.pop(sid, None)
    return len(stale)
