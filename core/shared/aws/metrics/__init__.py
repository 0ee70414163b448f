"""
core/shared/aws/metrics - CloudWatch Metrics Batch Utilities

GetMetricData 배치 조회 도구 모음.

Usage:
    from core.shared.aws.metrics import MetricQuery, batch_get_metric_values

    queries = [MetricQuery(key=("cpu", 0), namespace="AWS/EC2", metric_name="CPUUtilization",
                           dimensions={"InstanceId": "i-123"}, stat="Average")]
    values = batch_get_metric_values(cloudwatch, queries, start, end, period=3600)
"""

from .batch_metrics import (
    MetricQuery,
    batch_get_metric_values,
    chunk_count,
    finite_values,
)

__all__ = [
    "MetricQuery",
    "batch_get_metric_values",
    "chunk_count",
    "finite_values",
]
