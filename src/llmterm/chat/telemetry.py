"""Throughput telemetry derived from final stream fragments."""

from dataclasses import dataclass

from .models import ResponseFragment

NANOS_PER_SECOND = 1e9


def tokens_per_second(fragment: ResponseFragment) -> float | None:
    """Overall throughput of a finished response.

    Counts prompt and completion tokens over the total request duration.
    Returns None unless the fragment is final with a nonzero completion
    count and duration.
    """
    if not fragment.is_final or fragment.eval_count <= 0 or fragment.total_duration <= 0:
        return None
    total_tokens = fragment.prompt_eval_count + fragment.eval_count
    return total_tokens / (fragment.total_duration / NANOS_PER_SECOND)


@dataclass
class ModelMetrics:
    """Running model statistics shown by the metrics panel."""

    model: str = ""
    tokens_per_second: float = 0.0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_seconds: float = 0.0
    turns: int = 0

    def update(self, fragment: ResponseFragment) -> bool:
        """Record a final fragment. Returns False if it carries no telemetry."""
        rate = tokens_per_second(fragment)
        if rate is None:
            return False
        if fragment.model:
            self.model = fragment.model
        self.tokens_per_second = rate
        self.prompt_tokens += fragment.prompt_eval_count
        self.completion_tokens += fragment.eval_count
        self.total_seconds += fragment.total_duration / NANOS_PER_SECOND
        self.turns += 1
        return True

    def summary(self) -> str:
        model = self.model or "unknown"
        return (
            f"Model: {model}  Speed: {self.tokens_per_second:.1f} tok/s  "
            f"Tokens: {self.prompt_tokens + self.completion_tokens:,} "
            f"({self.prompt_tokens:,}/{self.completion_tokens:,})  Turns: {self.turns}"
        )
