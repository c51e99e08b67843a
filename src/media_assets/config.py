"""Object store configuration loaded from the process environment."""

import os
from collections.abc import Mapping

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, StrictStr
from pydantic import ValidationError as PydanticValidationError

from media_assets.models.errors import StorageUnavailableError
from media_assets.utils.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    ENV_ACCESS_KEY_ID,
    ENV_ACCOUNT_ID,
    ENV_AWS_ENDPOINT_URL,
    ENV_BUCKET_NAME,
    ENV_CONNECT_TIMEOUT,
    ENV_OPERATION_TIMEOUT,
    ENV_PUBLIC_DOMAIN,
    ENV_READ_TIMEOUT,
    ENV_SECRET_ACCESS_KEY,
    REQUIRED_ENV_VARS,
    STORE_HOST_SUFFIX,
    STORE_REGION,
)

logger = Logger(UTC=True)


class StorageSettings(BaseModel):
    """Immutable object store settings.

    Read once at process start; changing them requires a redeploy.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_id: StrictStr = Field(..., min_length=1, description="Store account identifier")
    access_key_id: StrictStr = Field(..., min_length=1, repr=False)
    secret_access_key: StrictStr = Field(..., min_length=1, repr=False)
    bucket_name: StrictStr = Field(..., min_length=1, description="Bucket holding all assets")
    public_domain: StrictStr | None = Field(None, description="Optional custom public hostname")
    endpoint_url: StrictStr | None = Field(None, description="Override for the S3 API endpoint")
    region: StrictStr = STORE_REGION

    connect_timeout: PositiveFloat = DEFAULT_CONNECT_TIMEOUT
    read_timeout: PositiveFloat = DEFAULT_READ_TIMEOUT
    operation_timeout: PositiveFloat = DEFAULT_OPERATION_TIMEOUT

    @property
    def api_endpoint(self) -> str:
        """S3 API endpoint; the account-scoped store endpoint unless overridden."""
        if self.endpoint_url:
            return self.endpoint_url
        return f"https://{self.account_id}.{STORE_HOST_SUFFIX}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StorageSettings":
        """Build settings from environment variables.

        Raises:
            StorageUnavailableError: If a required variable is missing
                or a value is malformed
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]
        if missing:
            logger.warning(
                "Object store configuration incomplete",
                extra={"missing": missing},
            )
            raise StorageUnavailableError(
                message="Image storage is not configured",
                details={"missing": missing},
            )

        values: dict[str, object] = {
            "account_id": env[ENV_ACCOUNT_ID],
            "access_key_id": env[ENV_ACCESS_KEY_ID],
            "secret_access_key": env[ENV_SECRET_ACCESS_KEY],
            "bucket_name": env[ENV_BUCKET_NAME],
            "public_domain": env.get(ENV_PUBLIC_DOMAIN) or None,
            "endpoint_url": env.get(ENV_AWS_ENDPOINT_URL) or None,
        }

        for field_name, env_name in (
            ("connect_timeout", ENV_CONNECT_TIMEOUT),
            ("read_timeout", ENV_READ_TIMEOUT),
            ("operation_timeout", ENV_OPERATION_TIMEOUT),
        ):
            raw = env.get(env_name)
            if raw:
                values[field_name] = raw

        try:
            return cls.model_validate(values, strict=False)
        except PydanticValidationError as exc:
            fields = [".".join(str(x) for x in err["loc"]) for err in exc.errors()]
            logger.error("Object store configuration invalid", extra={"fields": fields})
            raise StorageUnavailableError(
                message="Image storage configuration is invalid",
                details={"fields": fields},
            ) from exc
