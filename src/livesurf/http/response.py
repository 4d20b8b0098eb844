from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class HttpResponse:
    """Fully read HTTP response as handed back by a transport."""

    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
