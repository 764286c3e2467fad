from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from rsabench.manual.keys import MIN_KEY_BITS


class BenchSettings(BaseModel):
    iterations: int = Field(default=100, ge=0)
    key_bits: int = Field(default=2048, ge=MIN_KEY_BITS, alias="key-bits")
    key_sizes: list[int] = Field(default_factory=lambda: [512, 1024, 2048], alias="key-sizes")
    sweep_iterations: int = Field(default=50, ge=0, alias="sweep-iterations")
    message: int = Field(default=12345, ge=0)
    message_values: list[int] = Field(
        default_factory=lambda: [100, 1000, 10000, 100000], alias="message-values"
    )
    library_message: str = Field(default="Hello, RSA!", alias="library-message")

    model_config = {
        "populate_by_name": True,
        "extra": "forbid",
    }

    @field_validator("key_sizes")
    @classmethod
    def _check_key_sizes(cls, v: list[int]) -> list[int]:
        for bits in v:
            if bits < MIN_KEY_BITS:
                raise ValueError(f"key size {bits} is below {MIN_KEY_BITS} bits")
        return v

    @field_validator("message_values")
    @classmethod
    def _check_message_values(cls, v: list[int]) -> list[int]:
        if any(m < 0 for m in v):
            raise ValueError("message values must be non-negative")
        return v

    def with_overrides(self, **overrides: Any) -> "BenchSettings":
        # CLI flags left unset arrive as None and keep the file value
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return BenchSettings.model_validate({**self.model_dump(), **changes})
