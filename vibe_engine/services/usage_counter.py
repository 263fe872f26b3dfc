"""
In-memory usage counter for remote generation calls.

Advisory only: nothing is persisted, counts reset on restart, and the
limit is displayed but never enforced. Increments are not guarded, so
concurrent requests may lose updates.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from vibe_engine.config import settings


@dataclass(frozen=True)
class UsageSnapshot:
    requests: int
    tokens: int
    limit: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class UsageCounter:
    """Counts successful remote calls and the tokens they consumed"""

    def __init__(self, limit: Optional[int] = None):
        self.limit = settings.USAGE_LIMIT if limit is None else limit
        self.requests = 0
        self.tokens = 0

    def record(self, tokens: int = 0) -> UsageSnapshot:
        """Record one successful remote call and return the new totals"""
        # Both totals are computed before either is stored
        new_tokens = self.tokens + int(tokens or 0)
        new_requests = self.requests + 1
        self.requests, self.tokens = new_requests, new_tokens
        return self.snapshot()

    def snapshot(self) -> UsageSnapshot:
        return UsageSnapshot(requests=self.requests, tokens=self.tokens, limit=self.limit)
