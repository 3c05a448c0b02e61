"""DynamoDB history store for privacy-safe login records."""

import logging, os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from geoguard.common.constants import StorageConstants
from geoguard.common.exceptions import HistoryStoreError
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.history.store import HistoryStore

logger = logging.getLogger(__name__)


class DynamoDBHistoryStore(HistoryStore):
    """DynamoDB store keyed by user, sorted by login time.

    Table layout:
        pk: USER#<user_id>
        sk: LOGIN#<iso timestamp>
        ttl_timestamp: optional expiry (epoch seconds)

    Items hold exactly the LoginRecord fields plus the keys above.
    """

    DEFAULT_REGION = "us-east-1"
    BOOKKEEPING_KEYS = ("pk", "sk", "ttl_timestamp")

    def __init__(
        self,
        table_name: Optional[str] = None,
        region: Optional[str] = None,
        aws_profile: Optional[str] = None,
        enable_ttl: bool = True,
        ttl_days: int = StorageConstants.DEFAULT_TTL_DAYS,
    ):
        self.table_name = table_name or os.environ.get("GEOGUARD_DYNAMODB_TABLE")
        if not self.table_name:
            raise ValueError("GEOGUARD_DYNAMODB_TABLE required")

        self.region = region or os.environ.get("AWS_REGION", self.DEFAULT_REGION)
        self.enable_ttl = enable_ttl and ttl_days > 0
        self.ttl_days = ttl_days

        if aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.dynamodb = session.resource("dynamodb", region_name=self.region)
        else:
            self.dynamodb = boto3.resource("dynamodb", region_name=self.region)

        self.table = self.dynamodb.Table(self.table_name)
        logger.info(f"DynamoDB history store initialized: {self.table_name} ({self.region})")

    @staticmethod
    def _partition_key(user_id: str) -> str:
        return f"{StorageConstants.DYNAMODB_USER_PREFIX}{user_id}"

    def _get_ttl_timestamp(self, timestamp: datetime) -> int:
        return int((timestamp + timedelta(days=self.ttl_days)).timestamp())

    def _build_item(self, record: LoginRecord) -> Dict[str, Any]:
        data = record.to_storage_dict()
        item = {
            "pk": self._partition_key(record.user_id),
            "sk": f"{StorageConstants.DYNAMODB_LOGIN_PREFIX}{record.timestamp.astimezone(timezone.utc).isoformat()}",
            **data,
        }
        if self.enable_ttl:
            item["ttl_timestamp"] = self._get_ttl_timestamp(record.timestamp)
        return item

    @staticmethod
    def _item_to_record(item: Dict[str, Any]) -> LoginRecord:
        # DynamoDB returns numbers as Decimal
        data = dict(item)
        for key in ("asn", "city_geoname_id"):
            if key in data:
                data[key] = int(data[key])
        return LoginRecord.from_storage_dict(data)

    def fetch_last(self, user_id: str) -> Optional[LoginRecord]:
        try:
            response = self.table.query(
                KeyConditionExpression="pk = :pk AND begins_with(sk, :login)",
                ExpressionAttributeValues={
                    ":pk": self._partition_key(user_id),
                    ":login": StorageConstants.DYNAMODB_LOGIN_PREFIX,
                },
                ScanIndexForward=False,
                Limit=1,
            )
        except ClientError as e:
            logger.error(f"fetch_last failed: {e}")
            raise HistoryStoreError(f"DynamoDB query failed: {e}", user_id=user_id) from e

        items = response.get("Items", [])
        if not items:
            return None
        return self._item_to_record(items[0])

    def store(self, record: LoginRecord) -> None:
        if record is None:
            raise HistoryStoreError("record cannot be None")
        try:
            self.table.put_item(Item=self._build_item(record))
        except ClientError as e:
            logger.error(f"store failed: {e}")
            raise HistoryStoreError(f"DynamoDB put failed: {e}", user_id=record.user_id) from e
