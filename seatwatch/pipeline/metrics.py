from dataclasses import asdict, dataclass, field

DONE = "done"
RETIRED = "retired"


@dataclass
class VenueMetrics:
    """Track polling metrics for each venue."""
    name: str
    fetches: int = 0
    failures: int = 0
    polls_scheduled: int = 0
    show_count: int = 0
    outcome: str = None
    error_messages: list = field(default_factory=list)
    duration_ms: float = 0.0

    def to_status(self):
        return asdict(self)
