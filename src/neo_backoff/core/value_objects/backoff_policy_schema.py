"""Backoff policy schema for untyped mapping input."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, model_validator

from ...config.constants import BackoffDefaults


class BackoffPolicySchema(BaseModel):
    """Validation model used by BackoffPolicy.from_dict."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cap_ms: StrictInt = Field(default=BackoffDefaults.CAP_MS, ge=0, description="Maximum wait in milliseconds")
    base_ms: StrictInt = Field(default=BackoffDefaults.BASE_MS, ge=0, description="Base wait unit in milliseconds")
    max_attempts: Optional[StrictInt] = Field(
        default=BackoffDefaults.MAX_ATTEMPTS, ge=1, description="Attempt budget, None when infinite"
    )
    infinite: StrictBool = Field(default=False, description="Retry until success")
    jitter: StrictBool = Field(default=BackoffDefaults.JITTER, description="Apply full jitter to waits")

    @model_validator(mode="after")
    def check_attempt_budget(self):
        """Require an attempt budget unless running unbounded."""
        if self.max_attempts is None and not self.infinite:
            raise ValueError("max_attempts is required unless infinite is true")
        return self
