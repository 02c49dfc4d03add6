"""
Request descriptor

One descriptor per call: built by a resource operation, validated, consumed
by a single dispatch.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .urls import AddressingMode, ThirdPartyApiRoute


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"
    UPLOAD = "UPLOAD"

    @property
    def http_verb(self) -> str:
        """Verb sent on the wire; uploads are binary PATCH requests"""
        return "PATCH" if self is HttpMethod.UPLOAD else self.value

    @property
    def requires_if_match(self) -> bool:
        return self in (HttpMethod.PATCH, HttpMethod.UPLOAD)


@dataclass(frozen=True)
class RequestDescriptor:
    endpoint_path: str
    method: HttpMethod = HttpMethod.GET
    mode: AddressingMode = AddressingMode.DEFAULT
    query_string: Optional[str] = None
    body: Optional[Any] = None
    file_path: Optional[Union[str, Path]] = None
    api_publisher: Optional[str] = None
    api_group: Optional[str] = None
    api_version: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.endpoint_path.startswith("/"):
            raise ValueError(f"Endpoint path must start with '/': {self.endpoint_path!r}")
        if self.query_string and not self.query_string.startswith("?"):
            raise ValueError(f"Query string must start with '?': {self.query_string!r}")
        if self.body is not None and self.file_path is not None:
            raise ValueError("A request carries either a JSON body or a file, not both")
        if self.file_path is not None and self.method is not HttpMethod.UPLOAD:
            raise ValueError("file_path is only valid for UPLOAD requests")
        if self.method is HttpMethod.UPLOAD and self.file_path is None:
            raise ValueError("UPLOAD requests need a file_path")

    @property
    def third_party_route(self) -> ThirdPartyApiRoute:
        return ThirdPartyApiRoute(
            publisher=self.api_publisher,
            group=self.api_group,
            version=self.api_version,
        )
