"""Backoff policy value object.

A BackoffPolicy holds everything the retry loop needs to know about
timing and attempt budget. It is immutable and validated on construction,
so a policy that exists is always usable and may be shared freely across
threads.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ...config.constants import BackoffDefaults
from ..exceptions import InvalidBackoffConfiguration
from .backoff_policy_schema import BackoffPolicySchema


def _require_int(field_name: str, value: Any) -> None:
    # bool is an int subclass but never a meaningful duration or count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidBackoffConfiguration.for_invalid_type(field_name, value, "int")


@dataclass(frozen=True)
class BackoffPolicy:
    """Configuration for exponential backoff retries.

    Attributes:
        cap_ms: Maximum wait between attempts
        base_ms: Wait unit multiplied by 2**attempt
        max_attempts: Attempt budget, or None for unbounded retries
        jitter: Draw each wait uniformly from [0, computed wait)
    """

    cap_ms: int = BackoffDefaults.CAP_MS
    base_ms: int = BackoffDefaults.BASE_MS
    max_attempts: Optional[int] = BackoffDefaults.MAX_ATTEMPTS
    jitter: bool = BackoffDefaults.JITTER

    def __post_init__(self):
        """Validate backoff policy parameters."""
        _require_int("cap_ms", self.cap_ms)
        _require_int("base_ms", self.base_ms)
        if self.cap_ms < 0:
            raise InvalidBackoffConfiguration.for_negative_duration("cap_ms", self.cap_ms)
        if self.base_ms < 0:
            raise InvalidBackoffConfiguration.for_negative_duration("base_ms", self.base_ms)
        if self.max_attempts is not None:
            _require_int("max_attempts", self.max_attempts)
            if self.max_attempts < 1:
                raise InvalidBackoffConfiguration.for_invalid_max_attempts(self.max_attempts)
        if not isinstance(self.jitter, bool):
            raise InvalidBackoffConfiguration.for_invalid_type("jitter", self.jitter, "bool")

    @classmethod
    def unbounded(
        cls,
        cap_ms: int = BackoffDefaults.CAP_MS,
        base_ms: int = BackoffDefaults.BASE_MS,
        jitter: bool = BackoffDefaults.JITTER,
    ) -> "BackoffPolicy":
        """Create a policy that retries until the task succeeds."""
        return cls(cap_ms=cap_ms, base_ms=base_ms, max_attempts=None, jitter=jitter)

    @classmethod
    def builder(cls) -> "BackoffPolicyBuilder":
        """Start a fluent policy builder initialised with the defaults."""
        return BackoffPolicyBuilder()

    @property
    def is_unbounded(self) -> bool:
        """Check if the policy retries without an attempt budget."""
        return self.max_attempts is None

    def should_continue(self, attempt: int) -> bool:
        """
        Decide whether another attempt may run.

        Args:
            attempt: Number of failed attempts so far

        Returns:
            True if the loop should invoke the task again
        """
        if self.max_attempts is None:
            return True
        return attempt < self.max_attempts

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BackoffPolicy":
        """Create backoff policy from a caller-supplied mapping.

        Raises:
            InvalidBackoffConfiguration: if any field is missing a valid value
        """
        try:
            schema = BackoffPolicySchema.model_validate(dict(data))
        except ValidationError as e:
            errors = {
                ".".join(str(part) for part in error["loc"]) or "policy": error["msg"]
                for error in e.errors()
            }
            raise InvalidBackoffConfiguration(
                message=f"Invalid backoff policy: {len(errors)} error(s)",
                configuration_errors=errors,
            ) from e

        return cls(
            cap_ms=schema.cap_ms,
            base_ms=schema.base_ms,
            max_attempts=None if schema.infinite else schema.max_attempts,
            jitter=schema.jitter,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert backoff policy to dictionary."""
        return {
            "cap_ms": self.cap_ms,
            "base_ms": self.base_ms,
            "max_attempts": self.max_attempts,
            "infinite": self.is_unbounded,
            "jitter": self.jitter,
        }


class BackoffPolicyBuilder:
    """Fluent builder for BackoffPolicy.

    Values are only validated when build() is called.
    """

    def __init__(self):
        self._cap_ms = BackoffDefaults.CAP_MS
        self._base_ms = BackoffDefaults.BASE_MS
        self._max_attempts = BackoffDefaults.MAX_ATTEMPTS
        self._infinite = False
        self._jitter = BackoffDefaults.JITTER

    def with_cap(self, cap_ms: int) -> "BackoffPolicyBuilder":
        """The max wait time, in milliseconds."""
        self._cap_ms = cap_ms
        return self

    def with_base(self, base_ms: int) -> "BackoffPolicyBuilder":
        """The base wait time, in milliseconds."""
        self._base_ms = base_ms
        return self

    def with_max_attempts(self, max_attempts: int) -> "BackoffPolicyBuilder":
        """The maximum number of task invocations."""
        self._max_attempts = max_attempts
        self._infinite = False
        return self

    def with_infinite_attempts(self) -> "BackoffPolicyBuilder":
        """Retry until the task succeeds."""
        self._infinite = True
        return self

    def with_jitter(self, enabled: bool = True) -> "BackoffPolicyBuilder":
        self._jitter = enabled
        return self

    def build(self) -> BackoffPolicy:
        return BackoffPolicy(
            cap_ms=self._cap_ms,
            base_ms=self._base_ms,
            max_attempts=None if self._infinite else self._max_attempts,
            jitter=self._jitter,
        )


# Named presets
DEFAULT_BACKOFF_POLICIES = {
    "default": BackoffPolicy(),

    "aggressive": BackoffPolicy(
        cap_ms=30000,
        base_ms=50,
        max_attempts=20,
        jitter=True,
    ),

    "conservative": BackoffPolicy(
        cap_ms=10000,
        base_ms=500,
        max_attempts=3,
        jitter=False,
    ),

    "single_attempt": BackoffPolicy(
        cap_ms=0,
        base_ms=0,
        max_attempts=1,
    ),

    "unbounded": BackoffPolicy.unbounded(jitter=True),
}
