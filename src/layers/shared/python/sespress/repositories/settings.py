"""DynamoDB-backed settings repository."""

import os
from typing import Any

import boto3
import structlog
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from sespress.models.settings import OPTION_NAMES
from sespress.utils.exceptions import ValidationError

logger = structlog.get_logger()

SETTINGS_PK = "SETTINGS#sespress"
OPTION_SK_PREFIX = "OPTION#"


class SettingsRepository:
    """Stores SesPress options in the single application table.

    One item per option: ``PK=SETTINGS#sespress``, ``SK=OPTION#<name>``,
    with the raw string in ``value``. All options are read with a single
    query and cached on the instance.
    """

    def __init__(self, table_name: str | None = None):
        """Initialize repository.

        Args:
            table_name: DynamoDB table name. Defaults to TABLE_NAME env var.
        """
        self.table_name = table_name or os.environ.get("TABLE_NAME", "sespress-dev")
        self._dynamodb = None
        self._table = None
        self._cache: dict[str, str] | None = None

    @property
    def dynamodb(self):
        """Get DynamoDB resource (lazy initialization)."""
        if self._dynamodb is None:
            self._dynamodb = boto3.resource("dynamodb")
        return self._dynamodb

    @property
    def table(self):
        """Get DynamoDB table (lazy initialization)."""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def _load(self) -> dict[str, str]:
        if self._cache is not None:
            return self._cache

        values: dict[str, str] = {}
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key("PK").eq(SETTINGS_PK) & Key("SK").begins_with(OPTION_SK_PREFIX),
        }
        try:
            while True:
                response = self.table.query(**kwargs)
                for item in response.get("Items", []):
                    name = item["SK"][len(OPTION_SK_PREFIX):]
                    values[name] = item.get("value", "")
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("DynamoDB settings query failed", error=str(e), table=self.table_name)
            raise

        self._cache = values
        return values

    def get(self, key: str) -> str | None:
        """Get the raw value of an option, or None if it was never stored."""
        return self._load().get(key)

    def get_all(self) -> dict[str, str]:
        """All stored options as raw strings."""
        return dict(self._load())

    def save(self, values: dict[str, str]) -> dict[str, str]:
        """Store option values.

        Args:
            values: Option name to raw string value.

        Returns:
            All stored options after the write.

        Raises:
            ValidationError: If an unknown option name is given.
        """
        unknown = sorted(set(values) - set(OPTION_NAMES))
        if unknown:
            raise ValidationError(
                message="Unknown settings",
                errors=[{"field": name, "message": "Unknown setting"} for name in unknown],
            )

        try:
            with self.table.batch_writer() as batch:
                for name, value in values.items():
                    batch.put_item(
                        Item={
                            "PK": SETTINGS_PK,
                            "SK": f"{OPTION_SK_PREFIX}{name}",
                            "value": value,
                        }
                    )
        except ClientError as e:
            logger.error("DynamoDB settings write failed", error=str(e), table=self.table_name)
            raise

        logger.info("Settings saved", options=sorted(values))
        self._cache = None
        return self.get_all()
