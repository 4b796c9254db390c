"""Client for a Confluent compatible schema registry."""

from __future__ import annotations

import base64
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlsplit

from .base import Schema
from .parse import parse

CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"
DEFAULT_TIMEOUT = 15.0


class RegistryError(Exception):
    """An error response returned by the registry."""

    def __init__(self, status_code: int, code: int = 0, message: str = "") -> None:
        super().__init__(message or f"registry error: {status_code}")
        self.status_code = status_code
        self.code = code
        self.message = message


@dataclass(frozen=True)
class SchemaInfo:
    """A schema together with its registry metadata."""

    schema: Schema
    id: int
    version: int


def _decode_first(data: bytes) -> Any:
    """Decode the first JSON value in the data, ignoring anything after it."""
    text = data.decode("utf-8").lstrip()
    value, _ = json.JSONDecoder().raw_decode(text)
    return value


def _error_from(status: int, body: bytes) -> RegistryError:
    try:
        payload = _decode_first(body)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return RegistryError(status)
    code = payload.get("error_code", 0)
    message = payload.get("message", "")
    return RegistryError(
        status,
        code if isinstance(code, int) else 0,
        message if isinstance(message, str) else "",
    )


class Client:
    """An HTTP schema registry client.

    Schemas fetched by id are cached in memory.
    """

    def __init__(
        self,
        base_url: str,
        *,
        opener: urllib.request.OpenerDirector | None = None,
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"invalid registry url: {base_url!r}")
        self.base_url = base_url.removesuffix("/")
        self.opener = opener if opener is not None else urllib.request.build_opener()
        self.credentials: tuple[str, str] | None = (
            (username, password) if username or password else None
        )
        self.timeout = timeout
        self._cache: dict[int, Schema] = {}

    def get_schema(self, schema_id: int) -> Schema:
        """Return the schema with the given id."""
        cached = self._cache.get(schema_id)
        if cached is not None:
            return cached
        payload = self._request("GET", f"/schemas/ids/{schema_id}")
        schema = parse(self._schema_text(payload))
        self._cache[schema_id] = schema
        return schema

    def get_subjects(self) -> list[str]:
        """Return the registry subjects."""
        return list(self._request("GET", "/subjects"))

    def get_versions(self, subject: str) -> list[int]:
        """Return the schema versions of a subject."""
        return list(self._request("GET", f"/subjects/{self._quote(subject)}/versions"))

    def get_schema_by_version(self, subject: str, version: int) -> Schema:
        """Return the schema of a subject at the given version."""
        payload = self._request(
            "GET", f"/subjects/{self._quote(subject)}/versions/{version}"
        )
        return parse(self._schema_text(payload))

    def get_latest_schema(self, subject: str) -> Schema:
        """Return the latest schema of a subject."""
        payload = self._request("GET", f"/subjects/{self._quote(subject)}/versions/latest")
        return parse(self._schema_text(payload))

    def get_latest_schema_info(self, subject: str) -> SchemaInfo:
        """Return the latest schema of a subject with its id and version."""
        payload = self._request("GET", f"/subjects/{self._quote(subject)}/versions/latest")
        return SchemaInfo(
            schema=parse(self._schema_text(payload)),
            id=int(payload.get("id", 0)),
            version=int(payload.get("version", 0)),
        )

    def create_schema(self, subject: str, schema: str) -> tuple[int, Schema]:
        """Register a schema under a subject, returning its id and parsed form."""
        payload = self._request(
            "POST", f"/subjects/{self._quote(subject)}/versions", {"schema": schema}
        )
        return self._id_of(payload), parse(schema)

    def is_registered(self, subject: str, schema: str) -> tuple[int, Schema]:
        """Look up a schema under a subject, returning its id and parsed form."""
        payload = self._request("POST", f"/subjects/{self._quote(subject)}", {"schema": schema})
        return self._id_of(payload), parse(schema)

    @staticmethod
    def _quote(subject: str) -> str:
        return quote(subject, safe="")

    @staticmethod
    def _schema_text(payload: Any) -> str:
        text = payload.get("schema", "") if isinstance(payload, dict) else ""
        return text if isinstance(text, str) else ""

    @staticmethod
    def _id_of(payload: Any) -> int:
        return int(payload.get("id", 0)) if isinstance(payload, dict) else 0

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        request = urllib.request.Request(self.base_url + path, data=data, method=method)
        request.add_header("Content-Type", CONTENT_TYPE)
        if self.credentials is not None:
            raw = ":".join(self.credentials).encode("utf-8")
            request.add_header("Authorization", "Basic " + base64.b64encode(raw).decode("ascii"))

        try:
            with self.opener.open(request, timeout=self.timeout) as response:
                status = response.status
                content = response.read()
        except urllib.error.HTTPError as err:
            with err:
                raise _error_from(err.code, err.read()) from None

        if status >= 400:
            raise _error_from(status, content)
        return _decode_first(content)