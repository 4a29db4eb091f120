"""Shared-key SAS URLs for single blobs.

Signing is a local HMAC over the account key (azure-storage-blob's
generate_blob_sas), so no network call is made and links are accepted by
Azure as-is.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import quote

from azure.storage.blob import BlobSasPermissions, generate_blob_sas

from blobkit.infrastructure.exceptions import SigningInputError
from blobkit.infrastructure.external.storage.options import StorageOptions
from blobkit.infrastructure.external.storage.paths import split_path
from blobkit.shared.utils.datetime import ensure_utc, truncate_to_seconds, utc_now

logger = logging.getLogger(__name__)

SAS_PROTOCOL = "https"
SAS_RESOURCE_BLOB = "b"

# Every blob-level permission; callers receive read/write/delete through one link.
FULL_BLOB_PERMISSIONS = str(
    BlobSasPermissions(
        read=True,
        add=True,
        create=True,
        write=True,
        delete=True,
        delete_previous_version=True,
        list=True,
        tag=True,
        permanent_delete=True,
        move=True,
        execute=True,
        set_immutability_policy=True,
    )
)


def parse_ip_range(value: str) -> str:
    """Normalize an IP restriction to SAS ``sip`` form.

    Accepts a single IPv4 address (``10.0.0.1``), an explicit range
    (``10.0.0.1-10.0.0.9``) or a CIDR block (``10.0.0.0/24``, expanded to
    first-last address). SAS only supports IPv4.

    Raises:
        SigningInputError: value is not a valid IPv4 address or range.
    """
    text = value.strip() if value else ""
    if not text:
        raise SigningInputError(value, "empty IP restriction")
    try:
        if "/" in text:
            network = ipaddress.IPv4Network(text, strict=False)
            first, last = network[0], network[-1]
        elif "-" in text:
            start, _, end = text.partition("-")
            first = ipaddress.IPv4Address(start.strip())
            last = ipaddress.IPv4Address(end.strip())
        else:
            first = last = ipaddress.IPv4Address(text)
    except ValueError as e:
        raise SigningInputError(value, str(e)) from e
    if last < first:
        raise SigningInputError(value, "range start is after range end")
    return str(first) if first == last else f"{first}-{last}"


@dataclass(frozen=True)
class SignedUrlSpec:
    """Everything that goes into one signature; built per call."""

    container: str
    key: str
    start: datetime
    expiry: datetime
    ip_range: str
    permission: str = FULL_BLOB_PERMISSIONS
    protocol: str = SAS_PROTOCOL
    resource: str = SAS_RESOURCE_BLOB


class SignedUrlIssuer:
    """Issues time-bounded, IP-restricted blob URLs signed with the account key."""

    def __init__(
        self,
        options: StorageOptions,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._options = options
        self._clock = clock

    def build_spec(self, remote_path: str, source_ip: str) -> SignedUrlSpec:
        """Resolve path and IP into a SignedUrlSpec starting now."""
        container, key = split_path(remote_path)
        ip_range = parse_ip_range(source_ip)
        start = truncate_to_seconds(ensure_utc(self._clock()))
        return SignedUrlSpec(
            container=container,
            key=key,
            start=start,
            expiry=start + timedelta(hours=self._options.sas_ttl_hours),
            ip_range=ip_range,
        )

    def sign(self, spec: SignedUrlSpec) -> str:
        """Return the SAS query string for spec."""
        return generate_blob_sas(
            account_name=self._options.account_name,
            container_name=spec.container,
            blob_name=spec.key,
            account_key=self._options.account_key,
            permission=spec.permission,
            expiry=spec.expiry,
            start=spec.start,
            ip=spec.ip_range,
            protocol=spec.protocol,
        )

    def issue(self, remote_path: str, source_ip: str) -> str:
        """Return ``https://{account}.{domain}/{container}/{key}?{sas}``.

        Raises:
            SigningInputError: source_ip is not an IPv4 address or range.
        """
        spec = self.build_spec(remote_path, source_ip)
        query = self.sign(spec)
        host = f"{self._options.account_name}.{self._options.storage_domain}"
        path = "/".join([quote(spec.container), quote(spec.key, safe="/")])
        logger.debug(
            "Issued SAS for %s/%s (ip=%s, expires=%s)",
            spec.container,
            spec.key,
            spec.ip_range,
            spec.expiry.isoformat(),
        )
        return f"{spec.protocol}://{host}/{path}?{query}"
