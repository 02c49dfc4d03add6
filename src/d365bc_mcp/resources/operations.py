"""
Generic resource operations

Customers, contacts, items, sales documents and subscriptions all follow the
same shape: build a path, build a partial payload, dispatch, unwrap the
result. ``ResourceOperations`` implements that once, parameterised by a
``ResourceSpec``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, Union
from urllib.parse import quote

import structlog

from ..client import (
    AddressingMode,
    HttpMethod,
    IBCClient,
    RequestDescriptor,
    build_payload,
)
from ..client.payload import ProvidedFields
from .models import BCFields

logger = structlog.get_logger(__name__)

# OData syntax characters left readable in query strings
_QUERY_SAFE = "$'(),=/:&@"
# A filter is a single parameter value: '&', '=', '+' and '#' must stay encoded
_FILTER_SAFE = "$'(),/:@"


def build_query_string(filter_query: Optional[str] = None, query: Optional[str] = None) -> Optional[str]:
    """
    Build a '?'-prefixed query string.

    Args:
        filter_query: OData filter expression, e.g. "displayName eq 'Acme'"
        query: Extra raw query options, e.g. "$top=10&$select=id,number"
    """
    parts = []
    if filter_query:
        parts.append(f"$filter={quote(filter_query, safe=_FILTER_SAFE)}")
    if query:
        parts.append(quote(query.lstrip("?"), safe=_QUERY_SAFE))
    return f"?{'&'.join(parts)}" if parts else None


@dataclass(frozen=True)
class ResourceSpec:
    """
    How a resource is addressed.

    Attributes:
        entity_set: Collection name in the API (e.g. "customers")
        fields_model: Field model validating create/update payloads
        mode: Addressing mode of the collection
        parent: Parent collection for nested resources (e.g. "salesOrders")
        quote_key: Keys are strings in the path: ('key') instead of (key)
        read_only: Collection does not accept create/update/delete
    """

    entity_set: str
    fields_model: Optional[Type[BCFields]] = None
    mode: AddressingMode = AddressingMode.DEFAULT
    parent: Optional[str] = None
    quote_key: bool = False
    read_only: bool = False

    def key_segment(self, key: str) -> str:
        return f"('{key}')" if self.quote_key else f"({key})"

    def collection_path(self, parent_id: Optional[str] = None) -> str:
        if self.parent:
            if not parent_id:
                raise ValueError(f"{self.entity_set} needs the id of its parent {self.parent}")
            return f"/{self.parent}({parent_id})/{self.entity_set}"
        return f"/{self.entity_set}"

    def entity_path(self, key: str, parent_id: Optional[str] = None) -> str:
        if not key:
            raise ValueError(f"{self.entity_set} key must not be empty")
        return f"{self.collection_path(parent_id)}{self.key_segment(key)}"


class ResourceOperations:
    """List/get/create/update/delete for one resource collection"""

    def __init__(self, client: IBCClient, spec: ResourceSpec) -> None:
        self.client = client
        self.spec = spec

    def _fields(self, fields: ProvidedFields) -> Dict[str, Any]:
        if self.spec.fields_model is not None and isinstance(fields, Mapping):
            # keys of the mapping are the provided fields
            fields = self.spec.fields_model.model_validate(dict(fields))
        return build_payload(fields)

    def _ensure_writable(self, operation: str) -> None:
        if self.spec.read_only:
            raise ValueError(f"{self.spec.entity_set} does not support {operation}")

    def list(
        self,
        filter_query: Optional[str] = None,
        query: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        result = self.client.dispatch(
            RequestDescriptor(
                self.spec.collection_path(parent_id),
                method=HttpMethod.GET,
                mode=self.spec.mode,
                query_string=build_query_string(filter_query, query),
            )
        )
        return list((result or {}).get("value", []))

    def get(self, key: str, parent_id: Optional[str] = None, query: Optional[str] = None) -> Dict[str, Any]:
        return self.client.dispatch(
            RequestDescriptor(
                self.spec.entity_path(key, parent_id),
                method=HttpMethod.GET,
                mode=self.spec.mode,
                query_string=build_query_string(query=query),
            )
        )

    def create(self, fields: ProvidedFields, parent_id: Optional[str] = None) -> Dict[str, Any]:
        self._ensure_writable("create")
        payload = self._fields(fields)
        logger.debug("Creating record", entity_set=self.spec.entity_set, fields=sorted(payload))
        return self.client.dispatch(
            RequestDescriptor(
                self.spec.collection_path(parent_id),
                method=HttpMethod.POST,
                mode=self.spec.mode,
                body=payload,
            )
        )

    def update(self, key: str, fields: ProvidedFields, parent_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        self._ensure_writable("update")
        payload = self._fields(fields)
        if not payload:
            raise ValueError(f"No fields provided to update on {self.spec.entity_set}({key})")
        logger.debug("Updating record", entity_set=self.spec.entity_set, key=key, fields=sorted(payload))
        return self.client.dispatch(
            RequestDescriptor(
                self.spec.entity_path(key, parent_id),
                method=HttpMethod.PATCH,
                mode=self.spec.mode,
                body=payload,
            )
        )

    def delete(self, key: str, parent_id: Optional[str] = None) -> None:
        self._ensure_writable("delete")
        self.client.dispatch(
            RequestDescriptor(
                self.spec.entity_path(key, parent_id),
                method=HttpMethod.DELETE,
                mode=self.spec.mode,
            )
        )
        logger.info("Record deleted", entity_set=self.spec.entity_set, key=key)


class PictureOperations:
    """Picture of an item, customer, contact or employee"""

    def __init__(self, client: IBCClient, entity_set: str) -> None:
        self.client = client
        self.entity_set = entity_set

    def _picture_path(self, key: str) -> str:
        return f"/{self.entity_set}({key})/picture"

    def get(self, key: str) -> Dict[str, Any]:
        """Picture metadata (id, width, height, contentType)"""
        return self.client.dispatch(RequestDescriptor(self._picture_path(key)))

    def download(self, key: str) -> Optional[bytes]:
        return self.client.dispatch(RequestDescriptor(f"{self._picture_path(key)}/pictureContent"))

    def upload(self, key: str, file_path: Union[str, Path]) -> None:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Picture file not found: {path}")
        self.client.dispatch(
            RequestDescriptor(
                f"{self._picture_path(key)}/pictureContent",
                method=HttpMethod.UPLOAD,
                file_path=path,
            )
        )
        logger.info("Picture uploaded", entity_set=self.entity_set, key=key, file=str(path))

    def delete(self, key: str) -> None:
        self.client.dispatch(RequestDescriptor(self._picture_path(key), method=HttpMethod.DELETE))


class ODataPageOperations:
    """Published OData V4 web services, company addressed by name"""

    def __init__(self, client: IBCClient) -> None:
        self.client = client

    def query(
        self,
        service_name: str,
        filter_query: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        result = self.client.dispatch(
            RequestDescriptor(
                f"/{service_name}",
                mode=AddressingMode.ODATA_ENDPOINT,
                query_string=build_query_string(filter_query, query),
            )
        )
        return list((result or {}).get("value", []))

    def create(self, service_name: str, fields: ProvidedFields) -> Dict[str, Any]:
        return self.client.dispatch(
            RequestDescriptor(
                f"/{service_name}",
                method=HttpMethod.POST,
                mode=AddressingMode.ODATA_ENDPOINT,
                body=build_payload(fields),
            )
        )

    def update(self, service_name: str, key_predicate: str, fields: ProvidedFields) -> Optional[Dict[str, Any]]:
        """
        Args:
            service_name: Published web service name
            key_predicate: OData key, e.g. "No='10000'"
            fields: Fields to change
        """
        return self.client.dispatch(
            RequestDescriptor(
                f"/{service_name}({key_predicate})",
                method=HttpMethod.PATCH,
                mode=AddressingMode.ODATA_ENDPOINT,
                body=build_payload(fields),
            )
        )

    def delete(self, service_name: str, key_predicate: str) -> None:
        self.client.dispatch(
            RequestDescriptor(
                f"/{service_name}({key_predicate})",
                method=HttpMethod.DELETE,
                mode=AddressingMode.ODATA_ENDPOINT,
            )
        )


class ThirdPartyApiOperations:
    """Custom APIs published by extensions under /api/{publisher}/{group}/{version}"""

    def __init__(self, client: IBCClient) -> None:
        self.client = client

    def request(
        self,
        publisher: str,
        group: str,
        version: str,
        endpoint_path: str,
        method: Union[HttpMethod, str] = HttpMethod.GET,
        body: Optional[ProvidedFields] = None,
        query: Optional[str] = None,
        file_path: Optional[Union[str, Path]] = None,
    ) -> Any:
        return self.client.dispatch(
            RequestDescriptor(
                endpoint_path,
                method=HttpMethod(method),
                mode=AddressingMode.THIRD_PARTY_API,
                query_string=build_query_string(query=query),
                body=build_payload(body) if body is not None else None,
                file_path=file_path,
                api_publisher=publisher,
                api_group=group,
                api_version=version,
            )
        )
