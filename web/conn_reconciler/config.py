"""
Configuration schema for the connection reconciliation engine.

Only the knobs the engine actually reads: the closed-row bound, the
classification literals for the two aggregate buckets, and the policy for
counters that go backwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

NegativeSpeedPolicy = Literal["passthrough", "clamp", "rebaseline"]


class EngineConfig(BaseModel):
    """
    Centralized, validated configuration for one ConnectionStore.
    """

    # === Retention ===
    max_closed_rows: int = Field(
        default=200,
        ge=0,
        description="Upper bound of the closed-connections view; also the slack "
        "kept in the historical working set beyond the active count.",
    )

    # === Bucket classification ===
    proxy_hop: str = Field(
        default="Proxy",
        min_length=1,
        description="Hop name that routes a connection into the proxied bucket.",
    )
    proxy_bucket: str = Field(
        default="Proxy",
        min_length=1,
        description="Key of the aggregate row for proxied connections.",
    )
    direct_bucket: str = Field(
        default="Direct",
        min_length=1,
        description="Key of the aggregate row for everything else.",
    )

    # === Counter anomalies ===
    negative_speed_policy: NegativeSpeedPolicy = Field(
        default="passthrough",
        description="What to do when a cumulative counter decreases between snapshots: "
        "pass the negative delta through, clamp it to 0, or rebaseline (speed 0).",
    )

    @model_validator(mode="after")
    def _distinct_buckets(self) -> "EngineConfig":
        if self.proxy_bucket == self.direct_bucket:
            raise ValueError("proxy_bucket and direct_bucket must differ")
        return self

    class Config:
        frozen = True  # shared between the store and request handlers
