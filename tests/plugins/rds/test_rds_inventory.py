"""
tests/plugins/rds/test_rds_inventory.py - RDS 인스턴스/스냅샷 조회 테스트
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from core.exceptions import APICallError
from plugins.rds.inventory import (
    DBInstanceSummary,
    _max_records,
    get_db_instance_details,
    list_db_instances,
    list_db_snapshots,
)


def db_instance(identifier, **extra):
    data = {
        "DBInstanceIdentifier": identifier,
        "Engine": "mysql",
        "EngineVersion": "8.0.35",
        "DBInstanceClass": "db.t3.micro",
        "DBInstanceStatus": "available",
        "Endpoint": {"Address": f"{identifier}.example.rds.amazonaws.com", "Port": 3306},
        "AvailabilityZone": "ap-northeast-2a",
        "PubliclyAccessible": False,
        "StorageEncrypted": True,
        "MultiAZ": False,
        "AllocatedStorage": 20,
        "DBName": "app",
    }
    data.update(extra)
    return data


class TestMaxRecords:
    @pytest.mark.parametrize("remaining,expected", [(1, 20), (20, 20), (50, 50), (100, 100), (500, 100)])
    def test_clamped_to_api_range(self, remaining, expected):
        assert _max_records(remaining) == expected


class TestListDbInstances:
    def test_summary_fields(self, mock_rds_client):
        mock_rds_client.describe_db_instances.return_value = {"DBInstances": [db_instance("orders-db")]}

        instances = list_db_instances(mock_rds_client, 20)

        assert instances == [
            DBInstanceSummary(
                db_instance_identifier="orders-db",
                engine="mysql",
                engine_version="8.0.35",
                instance_class="db.t3.micro",
                status="available",
                endpoint_address="orders-db.example.rds.amazonaws.com",
                endpoint_port=3306,
                availability_zone="ap-northeast-2a",
                publicly_accessible=False,
                storage_encrypted=True,
                multi_az=False,
                allocated_storage_gb=20,
                db_name="app",
            )
        ]

    def test_marker_pagination_and_cap(self):
        rds = MagicMock()
        rds.describe_db_instances.side_effect = [
            {"DBInstances": [db_instance(f"db-{n}") for n in range(20)], "Marker": "m1"},
            {"DBInstances": [db_instance(f"db-{n}") for n in range(20, 40)], "Marker": "m2"},
        ]

        instances = list_db_instances(rds, 25)

        assert len(instances) == 25
        calls = rds.describe_db_instances.call_args_list
        assert calls[0].kwargs == {"MaxRecords": 25}
        assert calls[1].kwargs == {"MaxRecords": 20, "Marker": "m1"}

    def test_missing_endpoint_and_identifier(self, mock_rds_client):
        mock_rds_client.describe_db_instances.return_value = {"DBInstances": [{"Engine": "postgres"}]}

        instance = list_db_instances(mock_rds_client, 5)[0]

        assert instance.db_instance_identifier == "unknown"
        assert instance.endpoint_address is None


class TestDescribeDbInstance:
    def test_details(self, mock_rds_client):
        mock_rds_client.describe_db_instances.return_value = {
            "DBInstances": [
                db_instance(
                    "orders-db",
                    DBInstanceArn="arn:aws:rds:ap-northeast-2:123456789012:db:orders-db",
                    MasterUsername="admin",
                    DBSubnetGroup={"VpcId": "vpc-1", "DBSubnetGroupName": "private"},
                    PreferredMaintenanceWindow="sun:18:00-sun:19:00",
                    PreferredBackupWindow="17:00-17:30",
                    BackupRetentionPeriod=7,
                )
            ]
        }

        details = get_db_instance_details(mock_rds_client, "orders-db")

        assert details.vpc_id == "vpc-1"
        assert details.subnet_group_name == "private"
        assert details.backup_retention_period_days == 7
        assert details.engine == "mysql"
        mock_rds_client.describe_db_instances.assert_called_once_with(DBInstanceIdentifier="orders-db")

    def test_empty_response_not_found(self, mock_rds_client):
        with pytest.raises(APICallError) as exc_info:
            get_db_instance_details(mock_rds_client, "ghost")

        assert exc_info.value.error_code == "DBInstanceNotFound"


class TestListDbSnapshots:
    def test_filter_by_instance(self, mock_rds_client):
        created = datetime(2024, 5, 1, 3, 0, tzinfo=timezone.utc)
        mock_rds_client.describe_db_snapshots.return_value = {
            "DBSnapshots": [
                {
                    "DBSnapshotIdentifier": "rds:orders-db-2024-05-01",
                    "DBInstanceIdentifier": "orders-db",
                    "Status": "available",
                    "SnapshotType": "automated",
                    "Engine": "mysql",
                    "SnapshotCreateTime": created,
                    "AllocatedStorage": 20,
                }
            ]
        }

        snapshots = list_db_snapshots(mock_rds_client, "orders-db", 10)

        assert snapshots[0].snapshot_create_time == "2024-05-01T03:00:00+00:00"
        assert mock_rds_client.describe_db_snapshots.call_args.kwargs == {
            "MaxRecords": 20,
            "DBInstanceIdentifier": "orders-db",
        }

    def test_all_instances(self, mock_rds_client):
        list_db_snapshots(mock_rds_client, None, 5)
        assert "DBInstanceIdentifier" not in mock_rds_client.describe_db_snapshots.call_args.kwargs


class TestRdsMoto:
    def test_lists_created_instance(self, moto_rds):
        moto_rds.create_db_instance(
            DBInstanceIdentifier="moto-db",
            DBInstanceClass="db.t3.micro",
            Engine="postgres",
            MasterUsername="admin",
            MasterUserPassword="password123",
            AllocatedStorage=20,
        )

        instances = list_db_instances(moto_rds, 20)

        assert [i.db_instance_identifier for i in instances] == ["moto-db"]
        assert instances[0].engine == "postgres"
