"""Records returned by the administrative client.

Models validate straight from the control plane's response payloads: field
aliases are the PascalCase keys used on the wire, so
``StreamDescription.model_validate(resp["StreamDescription"])`` is all the
mapping a call needs. All records are frozen.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class StreamStatus(StrEnum):
    CREATING = "CREATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"
    UPDATING = "UPDATING"


class ConsumerStatus(StrEnum):
    CREATING = "CREATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"


class EncryptionType(StrEnum):
    NONE = "NONE"
    KMS = "KMS"


class ScalingType(StrEnum):
    UNIFORM_SCALING = "UNIFORM_SCALING"


class MetricsName(StrEnum):
    """Shard-level metrics for enhanced monitoring."""
    INCOMING_BYTES = "IncomingBytes"
    INCOMING_RECORDS = "IncomingRecords"
    OUTGOING_BYTES = "OutgoingBytes"
    OUTGOING_RECORDS = "OutgoingRecords"
    WRITE_PROVISIONED_THROUGHPUT_EXCEEDED = "WriteProvisionedThroughputExceeded"
    READ_PROVISIONED_THROUGHPUT_EXCEEDED = "ReadProvisionedThroughputExceeded"
    ITERATOR_AGE_MILLISECONDS = "IteratorAgeMilliseconds"
    ALL = "ALL"


class WireModel(BaseModel):
    """Base for records parsed from PascalCase response payloads."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        revalidate_instances="never",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Listing items
# ─────────────────────────────────────────────────────────────────────────────


class Tag(WireModel):
    key: str
    value: str | None = None


class Consumer(WireModel):
    consumer_name: str
    consumer_arn: str = Field(alias="ConsumerARN")
    consumer_status: ConsumerStatus
    consumer_creation_timestamp: datetime


# ─────────────────────────────────────────────────────────────────────────────
# Stream structure
# ─────────────────────────────────────────────────────────────────────────────


class HashKeyRange(WireModel):
    starting_hash_key: str
    ending_hash_key: str


class SequenceNumberRange(WireModel):
    starting_sequence_number: str
    ending_sequence_number: str | None = None


class Shard(WireModel):
    shard_id: str
    parent_shard_id: str | None = None
    adjacent_parent_shard_id: str | None = None
    hash_key_range: HashKeyRange
    sequence_number_range: SequenceNumberRange

    @property
    def is_open(self) -> bool:
        return self.sequence_number_range.ending_sequence_number is None


class EnhancedMetrics(WireModel):
    shard_level_metrics: tuple[MetricsName, ...] = ()


# ─────────────────────────────────────────────────────────────────────────────
# Operation results
# ─────────────────────────────────────────────────────────────────────────────


class DescribeLimitsResponse(WireModel):
    shard_limit: int
    open_shard_count: int


class StreamDescription(WireModel):
    """Full description of a stream, including one page of its shards."""

    stream_name: str
    stream_arn: str = Field(alias="StreamARN")
    stream_status: StreamStatus
    shards: tuple[Shard, ...] = ()
    has_more_shards: bool = False
    retention_period_hours: int
    stream_creation_timestamp: datetime
    enhanced_monitoring: tuple[EnhancedMetrics, ...] = ()
    encryption_type: EncryptionType = EncryptionType.NONE
    key_id: str | None = None


class StreamDescriptionSummary(WireModel):
    stream_name: str
    stream_arn: str = Field(alias="StreamARN")
    stream_status: StreamStatus
    retention_period_hours: int
    stream_creation_timestamp: datetime
    enhanced_monitoring: tuple[EnhancedMetrics, ...] = ()
    encryption_type: EncryptionType = EncryptionType.NONE
    key_id: str | None = None
    open_shard_count: int
    consumer_count: int = 0


class ConsumerDescription(WireModel):
    consumer_name: str
    consumer_arn: str = Field(alias="ConsumerARN")
    consumer_status: ConsumerStatus
    consumer_creation_timestamp: datetime
    stream_arn: str = Field(alias="StreamARN")


class EnhancedMonitoringStatus(WireModel):
    stream_name: str
    current_shard_level_metrics: tuple[MetricsName, ...] = ()
    desired_shard_level_metrics: tuple[MetricsName, ...] = ()


class UpdateShardCountResponse(WireModel):
    stream_name: str
    current_shard_count: int
    target_shard_count: int
