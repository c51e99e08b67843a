"""Public URL construction and the inverse URL-to-key resolution."""

from urllib.parse import urlsplit

from aws_lambda_powertools import Logger

from media_assets.config import StorageSettings
from media_assets.models.errors import ConfigurationError, MalformedUrlError, ValidationError
from media_assets.utils.constants import (
    DOUBLED_SCHEME_MARKERS,
    ERROR_CODE_INVALID_URL,
    STORE_HOST_SUFFIX,
    URL_SCHEMES,
)

logger = Logger(UTC=True)


def strip_protocol(value: str | None) -> str | None:
    """Drop a leading http(s):// and trailing slashes; blank becomes None."""
    if value is None:
        return None

    cleaned = value.strip()
    for scheme in URL_SCHEMES:
        if cleaned.lower().startswith(scheme):
            cleaned = cleaned[len(scheme):]
            break

    cleaned = cleaned.rstrip("/")
    return cleaned or None


class UrlResolver:
    """Maps storage keys to public URLs and back.

    The custom public domain wins when configured; otherwise the canonical
    `https://{bucket}.{account}.r2.cloudflarestorage.com` endpoint is used.
    `build_url` and `parse_key` must share one instance's configuration
    for round-trips to hold.
    """

    def __init__(
        self,
        *,
        public_domain: str | None = None,
        bucket_name: str | None = None,
        account_id: str | None = None,
    ) -> None:
        self._public_domain = strip_protocol(public_domain)
        self._bucket_name = strip_protocol(bucket_name)
        self._account_id = strip_protocol(account_id)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "UrlResolver":
        return cls(
            public_domain=settings.public_domain,
            bucket_name=settings.bucket_name,
            account_id=settings.account_id,
        )

    @property
    def base_url(self) -> str:
        """Scheme and host every public URL starts with.

        Raises:
            ConfigurationError: If neither domain form is configured
        """
        if self._public_domain:
            return f"https://{self._public_domain}"

        if self._bucket_name and self._account_id:
            return f"https://{self._bucket_name}.{self._account_id}.{STORE_HOST_SUFFIX}"

        logger.error(
            "Public URL configuration incomplete",
            extra={
                "public_domain": self._public_domain,
                "bucket_name": self._bucket_name,
                "account_id": self._account_id,
            },
        )
        raise ConfigurationError(
            message="Image storage not properly configured",
            details={"missing": "public_domain or bucket_name/account_id"},
        )

    def build_url(self, key: str) -> str:
        """Public URL for `key`.

        Raises:
            ConfigurationError: If no domain configuration is present
            MalformedUrlError: If the composed URL has a doubled scheme
        """
        url = f"{self.base_url}/{key.lstrip('/')}"

        if url.startswith(DOUBLED_SCHEME_MARKERS[0]) or DOUBLED_SCHEME_MARKERS[1] in url:
            logger.error("Malformed URL detected", extra={"url": url})
            raise MalformedUrlError(
                message="Invalid URL format generated",
                details={"url": url},
            )

        return url

    def parse_key(self, url: str) -> str:
        """Recover the storage key from a public URL.

        Falls back to the last two path segments (`folder/filename`) when the
        URL matches neither the custom domain nor the canonical endpoint.

        Raises:
            ValidationError: If no key can be recovered
        """
        if not url or not url.strip():
            raise ValidationError(
                message="Image URL is empty",
                error_code=ERROR_CODE_INVALID_URL,
            )

        parts = urlsplit(url.strip())
        location = f"{parts.netloc}{parts.path}"

        if self._public_domain and location.startswith(f"{self._public_domain}/"):
            key = location[len(self._public_domain) + 1:]
        elif parts.netloc.endswith(f".{STORE_HOST_SUFFIX}"):
            key = parts.path.lstrip("/")
        else:
            segments = [segment for segment in location.split("/") if segment]
            key = "/".join(segments[-2:])
            logger.debug(
                "URL matched no configured domain, using trailing segments",
                extra={"url": url, "key": key},
            )

        if not key:
            raise ValidationError(
                message="Unable to resolve storage key from URL",
                error_code=ERROR_CODE_INVALID_URL,
                details={"url": url},
            )

        return key
