"""
Core data models for LogFollower.
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class LogEntry:
    """
    Represents one parsed log line.
    """
    raw: str
    offset: int = 0
    timestamp: Optional[datetime] = None
    level: str = "INFO"
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.timestamp is not None:
            data['timestamp'] = self.timestamp.isoformat()
        return data
