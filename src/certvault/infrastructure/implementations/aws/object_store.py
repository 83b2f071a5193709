"""
S3 implementation of the object store.

Works against AWS S3 and any S3-compatible endpoint (MinIO, Backblaze B2,
Cloudflare R2). boto3 calls are blocking, so each one runs in a worker
thread to keep the event loop free while the lock polls.
"""

import asyncio
import io
from typing import BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    HTTPClientError,
)
from loguru import logger

from certvault.infrastructure.repositories.object_store import ObjectStore
from certvault.models.errors import ObjectNotFoundError, StoreUnavailableError
from certvault.models.key_info import ObjectInfo

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
TRANSIENT_CODES = {
    "InternalError",
    "RequestTimeout",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
    "ThrottlingException",
}

# Connection failures and read timeouts
CONNECTION_ERRORS = (ConnectTimeoutError, EndpointConnectionError, HTTPClientError)


class S3ObjectStore(ObjectStore):
    """S3 implementation of ObjectStore.

    Environment Variables (through Settings):
    - S3_ENDPOINT: Endpoint host, e.g. "s3.eu-central-003.backblazeb2.com"
    - S3_ACCESS_KEY_ID / S3_SECRET_ACCESS_KEY: Static credentials
    - S3_BUCKET: Bucket name
    """

    def __init__(
        self,
        bucket_name: str,
        endpoint: str = "",
        access_key_id: str = "",
        secret_access_key: str = "",
        region_name: str = "us-east-1",
        secure: bool = True,
        bucket_check_timeout: float = 5.0,
    ):
        """Initialize S3 client.

        Args:
            bucket_name: Bucket name
            endpoint: Endpoint host or URL; empty to use AWS defaults
            access_key_id: Static access key (optional if using IAM role)
            secret_access_key: Static secret key
            region_name: Region
            secure: Use HTTPS when the endpoint has no scheme
            bucket_check_timeout: Seconds allowed for bucket_exists
        """
        self.bucket_name = bucket_name
        self.region_name = region_name
        self.bucket_check_timeout = bucket_check_timeout

        client_kwargs = {
            "region_name": region_name,
            "config": Config(retries={"max_attempts": 3, "mode": "standard"}),
        }
        if endpoint:
            client_kwargs["endpoint_url"] = _endpoint_url(endpoint, secure)
        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key

        self.client = boto3.client("s3", **client_kwargs)

        logger.info(
            f"Initialized S3ObjectStore with bucket={bucket_name}, "
            f"endpoint={endpoint or 'aws'}, region={region_name}"
        )

    async def bucket_exists(self) -> bool:
        """Check the bucket with head_bucket under an explicit timeout."""
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self.client.head_bucket, Bucket=self.bucket_name),
                timeout=self.bucket_check_timeout,
            )
            return True

        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                logger.debug(f"Bucket {self.bucket_name} does not exist")
                return False
            logger.error(f"Failed to check bucket {self.bucket_name}: {e}")
            raise

    async def get_object(self, name: str) -> BinaryIO:
        """Download an object into memory."""
        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket_name, Key=name
            )
            body = response["Body"]
            try:
                content = await asyncio.to_thread(body.read)
            finally:
                body.close()

            logger.debug(f"Downloaded object: s3://{self.bucket_name}/{name}")
            return io.BytesIO(content)

        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise ObjectNotFoundError(name) from e
            _raise_if_transient(e, name)
            logger.error(f"Failed to download object {name}: {e}")
            raise

        except CONNECTION_ERRORS as e:
            raise _unavailable(e, name) from e

    async def put_object(self, name: str, data: bytes) -> None:
        """Upload an object."""
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=name,
                Body=data,
                ContentLength=len(data),
            )
            logger.debug(f"Uploaded object: s3://{self.bucket_name}/{name}")

        except ClientError as e:
            _raise_if_transient(e, name)
            logger.error(f"Failed to upload object {name}: {e}")
            raise

        except CONNECTION_ERRORS as e:
            raise _unavailable(e, name) from e

    async def remove_object(self, name: str) -> None:
        """Delete an object. S3 treats deleting a missing key as success."""
        try:
            await asyncio.to_thread(
                self.client.delete_object, Bucket=self.bucket_name, Key=name
            )
            logger.debug(f"Deleted object: s3://{self.bucket_name}/{name}")

        except ClientError as e:
            _raise_if_transient(e, name)
            logger.error(f"Failed to delete object {name}: {e}")
            raise

        except CONNECTION_ERRORS as e:
            raise _unavailable(e, name) from e

    async def stat_object(self, name: str) -> ObjectInfo:
        """Read object metadata with head_object."""
        try:
            response = await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket_name, Key=name
            )

        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise ObjectNotFoundError(name) from e
            _raise_if_transient(e, name)
            logger.error(f"Failed to stat object {name}: {e}")
            raise

        except CONNECTION_ERRORS as e:
            raise _unavailable(e, name) from e

        return ObjectInfo(
            name=name,
            size=response["ContentLength"],
            last_modified=response["LastModified"],
        )

    async def list_objects(self, prefix: str, recursive: bool) -> list[str]:
        """List object names under a prefix using list_objects_v2 pages."""
        return await asyncio.to_thread(self._list_objects_sync, prefix, recursive)

    def _list_objects_sync(self, prefix: str, recursive: bool) -> list[str]:
        paginate_kwargs = {"Bucket": self.bucket_name, "Prefix": prefix}
        if not recursive:
            paginate_kwargs["Delimiter"] = "/"

        try:
            paginator = self.client.get_paginator("list_objects_v2")
            names = []

            for page in paginator.paginate(**paginate_kwargs):
                for obj in page.get("Contents", []):
                    names.append(obj["Key"])
                for common in page.get("CommonPrefixes", []):
                    names.append(common["Prefix"])

            logger.debug(f"Listed {len(names)} objects with prefix: {prefix}")
            return names

        except ClientError as e:
            _raise_if_transient(e, prefix)
            logger.error(f"Failed to list objects: {e}")
            raise

        except CONNECTION_ERRORS as e:
            raise _unavailable(e, prefix) from e


def _endpoint_url(endpoint: str, secure: bool) -> str:
    """Add a scheme to a bare endpoint host."""
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    scheme = "https" if secure else "http"
    return f"{scheme}://{endpoint}"


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _unavailable(error: Exception, name: str) -> StoreUnavailableError:
    logger.warning(f"Object store unavailable for {name}: {error}")
    return StoreUnavailableError(name)


def _raise_if_transient(error: ClientError, name: str) -> None:
    """Raise StoreUnavailableError for throttling and server-side failures."""
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    if _error_code(error) in TRANSIENT_CODES or status >= 500:
        raise _unavailable(error, name) from error
