"""
Tool Registry for the Business Central MCP Server

Centralized tool registration: session scope tools, resource CRUD tools,
pictures, OData pages and custom APIs.
"""

import json
from typing import Any, Callable, Dict, Optional
from fastmcp import FastMCP
from fastmcp.exceptions import FastMCPError
import structlog

from ..client import BCClient, HttpMethod
from ..resources import BusinessCentral, ResourceOperations

logger = structlog.get_logger(__name__)


def _to_json(result: Any) -> str:
    if isinstance(result, bytes):
        return json.dumps({"content_length": len(result)})
    return json.dumps(result, indent=2, default=str)


def _run(action: str, operation: Callable[[], Any]) -> str:
    """Run an operation and translate failures into tool errors"""
    try:
        return _to_json(operation())
    except Exception as e:
        logger.error("Tool operation failed", action=action, error=str(e))
        raise FastMCPError(f"Failed to {action}: {e}")


class ToolRegistry:
    """
    Centralized tool registration with consistent patterns.
    """

    @staticmethod
    def register_all_tools(mcp: FastMCP, client: BCClient) -> None:
        """Register all MCP tools for one client session"""
        logger.info("Registering MCP tools")

        bc = BusinessCentral(client)

        ToolRegistry._register_session_tools(mcp, client)

        for name, operations in (
            ("customer", bc.customers),
            ("contact", bc.contacts),
            ("item", bc.items),
            ("sales_quote", bc.sales_quotes),
            ("sales_order", bc.sales_orders),
            ("subscription", bc.subscriptions),
        ):
            ToolRegistry._register_resource_tools(mcp, name, operations)

        for name, operations in (
            ("sales_quote_line", bc.sales_quote_lines),
            ("sales_order_line", bc.sales_order_lines),
        ):
            ToolRegistry._register_line_tools(mcp, name, operations)

        ToolRegistry._register_picture_tools(mcp, bc)
        ToolRegistry._register_extension_tools(mcp, bc)

        logger.info("All MCP tools registered successfully")

    @staticmethod
    def _register_session_tools(mcp: FastMCP, client: BCClient) -> None:
        """Register authentication and scope tools"""

        @mcp.tool
        def authenticate(tenant_id: str, client_id: str, client_secret: str) -> str:
            """
            Authenticate against Azure AD with client credentials.

            Required once per session (and again after the ~1 hour token
            lifetime, when requests start failing with 401).

            Args:
                tenant_id: Azure AD tenant id
                client_id: App registration client id
                client_secret: App registration client secret
            """
            def operation() -> Dict[str, Any]:
                client.authenticate(tenant_id, client_id, client_secret)
                return client.context.describe()

            return _run("authenticate", operation)

        @mcp.tool
        def set_environment(name: str) -> str:
            """
            Select the Business Central environment (e.g. "Production", "Sandbox").

            Selecting a different environment clears the active company.
            """
            def operation() -> Dict[str, Any]:
                client.set_environment(name)
                return client.context.describe()

            return _run("set environment", operation)

        @mcp.tool
        def list_companies() -> str:
            """
            List companies of the selected environment.

            Requires: authenticate, set_environment.
            """
            return _run("list companies", client.list_companies)

        @mcp.tool
        def set_company(company_id: Optional[str] = None, company_name: Optional[str] = None) -> str:
            """
            Select the active company by id or by name.

            Requires: authenticate, set_environment. Either argument is enough;
            the other is looked up.
            """
            return _run(
                "set company",
                lambda: client.set_company(company_id=company_id, company_name=company_name),
            )

        @mcp.tool
        def set_debug(enabled: bool) -> str:
            """Enable or disable request diagnostics in the server log"""
            def operation() -> Dict[str, Any]:
                client.set_verbosity(enabled)
                return client.context.describe()

            return _run("set verbosity", operation)

        @mcp.tool
        def get_session() -> str:
            """Show the current session scope (token is never shown)"""
            return _run("get session", client.get_client_info)

    @staticmethod
    def _register_resource_tools(mcp: FastMCP, name: str, operations: ResourceOperations) -> None:
        """Register list/get/create/update/delete tools for one collection"""
        entity_set = operations.spec.entity_set

        def list_records(filter_query: Optional[str] = None, query: Optional[str] = None) -> str:
            return _run(f"list {entity_set}", lambda: operations.list(filter_query, query))

        def get_record(id: str) -> str:
            return _run(f"get {entity_set}({id})", lambda: operations.get(id))

        def create_record(fields: Dict[str, Any]) -> str:
            return _run(f"create {entity_set}", lambda: operations.create(fields))

        def update_record(id: str, fields: Dict[str, Any]) -> str:
            return _run(f"update {entity_set}({id})", lambda: operations.update(id, fields))

        def delete_record(id: str) -> str:
            def operation() -> Dict[str, Any]:
                operations.delete(id)
                return {"deleted": id}

            return _run(f"delete {entity_set}({id})", operation)

        mcp.tool(
            list_records,
            name=f"list_{name}s",
            description=(
                f"List {entity_set}. Optional OData filter_query "
                f"(e.g. \"displayName eq 'Acme'\") and raw query options (e.g. \"$top=10\")."
            ),
        )
        mcp.tool(get_record, name=f"get_{name}", description=f"Get one record of {entity_set} by id.")
        mcp.tool(
            create_record,
            name=f"create_{name}",
            description=(
                f"Create a record in {entity_set}. Only the given fields are sent "
                "(snake_case or camelCase field names)."
            ),
        )
        mcp.tool(
            update_record,
            name=f"update_{name}",
            description=(
                f"Update a record in {entity_set}. Only the given fields are changed; "
                "omitted fields are left untouched."
            ),
        )
        mcp.tool(delete_record, name=f"delete_{name}", description=f"Delete a record of {entity_set}.")

    @staticmethod
    def _register_line_tools(mcp: FastMCP, name: str, operations: ResourceOperations) -> None:
        """Register tools for document lines nested under their header"""
        entity_set = operations.spec.entity_set
        parent = operations.spec.parent

        def list_lines(document_id: str) -> str:
            return _run(f"list {entity_set}", lambda: operations.list(parent_id=document_id))

        def create_line(document_id: str, fields: Dict[str, Any]) -> str:
            return _run(f"create {entity_set}", lambda: operations.create(fields, parent_id=document_id))

        def update_line(document_id: str, id: str, fields: Dict[str, Any]) -> str:
            return _run(
                f"update {entity_set}({id})",
                lambda: operations.update(id, fields, parent_id=document_id),
            )

        def delete_line(document_id: str, id: str) -> str:
            def operation() -> Dict[str, Any]:
                operations.delete(id, parent_id=document_id)
                return {"deleted": id}

            return _run(f"delete {entity_set}({id})", operation)

        mcp.tool(list_lines, name=f"list_{name}s", description=f"List lines of a {parent} document.")
        mcp.tool(create_line, name=f"create_{name}", description=f"Add a line to a {parent} document.")
        mcp.tool(update_line, name=f"update_{name}", description=f"Update a line of a {parent} document.")
        mcp.tool(delete_line, name=f"delete_{name}", description=f"Delete a line of a {parent} document.")

    @staticmethod
    def _register_picture_tools(mcp: FastMCP, bc: BusinessCentral) -> None:
        """Register picture tools"""
        pictures = {
            "item": bc.item_pictures,
            "customer": bc.customer_pictures,
            "contact": bc.contact_pictures,
        }

        def _pictures_for(entity: str):
            if entity not in pictures:
                raise FastMCPError(f"Unsupported picture entity '{entity}', use one of {sorted(pictures)}")
            return pictures[entity]

        @mcp.tool
        def get_picture(entity: str, id: str) -> str:
            """
            Get picture metadata of an item, customer or contact.

            Args:
                entity: "item", "customer" or "contact"
                id: Record id
            """
            operations = _pictures_for(entity)
            return _run(f"get {entity} picture", lambda: operations.get(id))

        @mcp.tool
        def upload_picture(entity: str, id: str, file_path: str) -> str:
            """
            Upload a picture file for an item, customer or contact.

            Args:
                entity: "item", "customer" or "contact"
                id: Record id
                file_path: Local path of the image file
            """
            operations = _pictures_for(entity)

            def operation() -> Dict[str, Any]:
                operations.upload(id, file_path)
                return {"uploaded": file_path, "entity": entity, "id": id}

            return _run(f"upload {entity} picture", operation)

        @mcp.tool
        def delete_picture(entity: str, id: str) -> str:
            """Remove the picture of an item, customer or contact"""
            operations = _pictures_for(entity)

            def operation() -> Dict[str, Any]:
                operations.delete(id)
                return {"deleted": f"{entity}({id})/picture"}

            return _run(f"delete {entity} picture", operation)

    @staticmethod
    def _register_extension_tools(mcp: FastMCP, bc: BusinessCentral) -> None:
        """Register OData web service and custom API tools"""

        @mcp.tool
        def query_odata_service(
            service_name: str,
            filter_query: Optional[str] = None,
            query: Optional[str] = None,
        ) -> str:
            """
            Query a published OData V4 web service of the active company.

            Args:
                service_name: Published web service name (e.g. "Chart_of_Accounts")
                filter_query: OData filter expression
                query: Raw query options (e.g. "$top=10")
            """
            return _run(
                f"query OData service {service_name}",
                lambda: bc.odata.query(service_name, filter_query, query),
            )

        @mcp.tool
        def create_odata_record(service_name: str, fields: Dict[str, Any]) -> str:
            """Create a record through a published OData V4 web service"""
            return _run(
                f"create record in {service_name}",
                lambda: bc.odata.create(service_name, fields),
            )

        @mcp.tool
        def call_custom_api(
            publisher: str,
            group: str,
            version: str,
            endpoint_path: str,
            method: str = "GET",
            body: Optional[Dict[str, Any]] = None,
            query: Optional[str] = None,
        ) -> str:
            """
            Call a custom API published by an extension.

            Args:
                publisher: API publisher (e.g. "contoso")
                group: API group (e.g. "app1")
                version: API version (e.g. "v1.0")
                endpoint_path: Path below the company, starting with "/"
                method: GET, POST, PATCH or DELETE
                body: JSON body for POST/PATCH
                query: Raw query options
            """
            return _run(
                f"call custom API {publisher}/{group}/{version}{endpoint_path}",
                lambda: bc.custom_apis.request(
                    publisher,
                    group,
                    version,
                    endpoint_path,
                    method=HttpMethod(method.upper()),
                    body=body,
                    query=query,
                ),
            )
