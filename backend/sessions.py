"""In-memory session store for managing per-user design state"""

import uuid
from datetime import datetime
from typing import Dict, Any, Optional

from core.exporter import FieldBookExporter

# Global session store: session_id -> session_data
_sessions: Dict[str, Dict[str, Any]] = {}


def create_session(project_name: str = "Untitled Trial") -> str:
    """Create a new session with no design yet and return session_id"""
    session_id = str(uuid.uuid4())

    _sessions[session_id] = {
        "project_name": project_name,
        "designer": None,
        "exporter": FieldBookExporter(),
        "last_accessed": datetime.now(),
    }

    return session_id


def get_session(session_id: str) -> Optional[Dict[str, Any]]:
    """Get session data by ID, updating last_accessed"""
    session = _sessions.get(session_id)
    if session:
        session["last_accessed"] = datetime.now()
    return session


def delete_session(session_id: str) -> None:
    """Remove a session"""
    _sessions.pop(session_id, None)


def clear_sessions() -> None:
    """Remove all sessions"""
    _sessions.clear()


def cleanup_expired_sessions(max_age_seconds: int = 3600) -> int:
    """Remove sessions older than max_age_seconds. Returns count removed."""
    now = datetime.now()
    expired = [
        sid for sid, data in _sessions.items()
        if (now - data["last_accessed"]).total_seconds() > max_age_seconds
    ]
    for sid in expired:
        del _sessions[sid]
    return len(expired)
