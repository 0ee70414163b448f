"""
tests/plugins/rds/test_rds_metrics.py - RDS CPU 사용률 요약 테스트
"""

from datetime import datetime, timedelta, timezone

from plugins.rds.metrics import DBCpuMetrics, get_db_cpu_utilization

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestGetDbCpuUtilization:
    def test_request(self, mock_cloudwatch_client):
        get_db_cpu_utilization(mock_cloudwatch_client, "orders-db", 24, 300, now=NOW)

        kwargs = mock_cloudwatch_client.get_metric_statistics.call_args.kwargs
        assert kwargs["Namespace"] == "AWS/RDS"
        assert kwargs["MetricName"] == "CPUUtilization"
        assert kwargs["Dimensions"] == [{"Name": "DBInstanceIdentifier", "Value": "orders-db"}]
        assert kwargs["StartTime"] == NOW - timedelta(hours=24)
        assert kwargs["EndTime"] == NOW
        assert kwargs["Period"] == 300
        assert kwargs["Statistics"] == ["Average", "Minimum", "Maximum"]

    def test_no_datapoints(self, mock_cloudwatch_client):
        result = get_db_cpu_utilization(mock_cloudwatch_client, "orders-db", 24, 300, now=NOW)

        assert result == DBCpuMetrics(db_instance_identifier="orders-db", period_seconds=300, datapoints=0)

    def test_summary(self, mock_cloudwatch_client):
        mock_cloudwatch_client.get_metric_statistics.return_value = {
            "Datapoints": [
                {"Timestamp": NOW - timedelta(minutes=10), "Average": 10.0, "Minimum": 5.0, "Maximum": 20.0},
                {"Timestamp": NOW - timedelta(minutes=5), "Average": 30.0, "Minimum": 25.0, "Maximum": 60.0},
                {"Timestamp": NOW - timedelta(minutes=15), "Average": 20.0, "Minimum": 1.0, "Maximum": 22.0},
            ]
        }

        result = get_db_cpu_utilization(mock_cloudwatch_client, "orders-db", 1, 300, now=NOW)

        assert result.datapoints == 3
        assert result.average == 20.0
        assert result.minimum == 1.0
        assert result.maximum == 60.0
        assert result.latest_timestamp == (NOW - timedelta(minutes=5)).isoformat()
        assert result.latest_average == 30.0
