"""Administrative client for streams on the control plane."""

from .client import AdminClient, ControlPlaneApi
from .models import (
    Consumer,
    ConsumerDescription,
    ConsumerStatus,
    DescribeLimitsResponse,
    EncryptionType,
    EnhancedMetrics,
    EnhancedMonitoringStatus,
    HashKeyRange,
    MetricsName,
    ScalingType,
    SequenceNumberRange,
    Shard,
    StreamDescription,
    StreamDescriptionSummary,
    StreamStatus,
    Tag,
    UpdateShardCountResponse,
)

__all__ = [
    "AdminClient",
    "ControlPlaneApi",
    # Records
    "Consumer", "ConsumerDescription", "DescribeLimitsResponse", "EnhancedMetrics",
    "EnhancedMonitoringStatus", "HashKeyRange", "SequenceNumberRange", "Shard",
    "StreamDescription", "StreamDescriptionSummary", "Tag", "UpdateShardCountResponse",
    # Enumerations
    "ConsumerStatus", "EncryptionType", "MetricsName", "ScalingType", "StreamStatus",
]
