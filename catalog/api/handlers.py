#!/usr/bin/env python3
"""
handlers.py
-----------
Handler-style entry points for master data.

Each handler takes a request object exposing route parameters and the JSON
body, and returns a JsonResponse. Routing, authentication and the HTTP
server itself live outside this package; the handlers only map repository
and dispatcher outcomes to status codes.

Routes (informative):
    GET    /master/:type              get_master_data
    GET    /master/:type/:id          get_master_item
    POST   /master/:type              create_master_data
    PUT    /master/:type/:id          update_master_data
    PUT    /master/:type/:id/sync     update_master_data_with_sync
    DELETE /master/:type/:id          delete_master_data

Status mapping:
    ValidationError, DuplicateNameError   400 {error, details?}
    NotFoundError                          404 {error}
    any other error                        500 {error, details}

Usage:
    api = MasterDataApi.from_db(db)
    response = api.update_master_data_with_sync(
        SimpleRequest({"type": "actress", "id": item_id}, {"name": "Maria O."})
    )
    response.status, response.body
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

# --- Local imports ---
from catalog.core.exceptions import NotFoundError, ValidationError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.database.managers import MasterDataManager
from catalog.sync.dispatcher import SyncUpdateDispatcher


class Request(Protocol):
    """Minimal request interface the handlers depend on."""

    def param(self, name: str) -> Optional[str]:
        """Route parameter by name, or None."""
        ...

    def json(self) -> Any:
        """Decoded JSON body."""
        ...


@dataclass
class SimpleRequest:
    """In-process Request implementation."""

    params: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    def param(self, name: str) -> Optional[str]:
        return self.params.get(name)

    def json(self) -> Any:
        return self.body


@dataclass
class JsonResponse:
    """
    JSON response produced by a handler.

    Attributes:
        body: JSON-serializable body
        status: HTTP status code
    """

    body: Dict[str, Any]
    status: int = 200

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "body": self.body}


class MasterDataApi:
    """
    Master data handlers.

    Attributes:
        master_data: Master data repository
        dispatcher: Sync-aware update dispatcher
        logger: Optional logger
    """

    def __init__(
        self,
        master_data: MasterDataManager,
        dispatcher: SyncUpdateDispatcher,
        logger: Optional[CatalogLogger] = None,
    ) -> None:
        self.master_data = master_data
        self.dispatcher = dispatcher
        self.logger = logger

    @classmethod
    def from_db(cls, db) -> "MasterDataApi":
        """Build the handlers from a CatalogDB."""
        return cls(db.master_data, db.dispatcher, db.logger)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def get_master_data(self, request: Request) -> JsonResponse:
        """List every item of a type."""
        return self._handle(
            "fetch master data",
            lambda: {"data": self.master_data.list_by_type(request.param("type"))},
        )

    def get_master_item(self, request: Request) -> JsonResponse:
        """Fetch one item."""

        def _get() -> Dict[str, Any]:
            item_type = request.param("type")
            item_id = request.param("id")
            item = self.master_data.find_by_id(item_type, item_id)
            if item is None:
                raise NotFoundError(item_type, item_id)
            return {"data": item}

        return self._handle("fetch master data item", _get)

    def create_master_data(self, request: Request) -> JsonResponse:
        """Create an item from the request body."""
        return self._handle(
            "create master data",
            lambda: {
                "data": self.master_data.create(
                    request.param("type"), self._body(request)
                )
            },
        )

    def update_master_data(self, request: Request) -> JsonResponse:
        """Update an item without propagating renames."""
        return self._handle(
            "update master data",
            lambda: {
                "data": self.master_data.update(
                    request.param("type"), request.param("id"), self._body(request)
                )
            },
        )

    def update_master_data_with_sync(self, request: Request) -> JsonResponse:
        """Update an item and propagate a rename to catalog records."""
        return self._handle(
            "update master data with sync",
            lambda: self.dispatcher.update_with_sync(
                request.param("type"), request.param("id"), self._body(request)
            ).to_dict(),
        )

    def delete_master_data(self, request: Request) -> JsonResponse:
        """Delete an item. Catalog references are left untouched."""

        def _delete() -> Dict[str, Any]:
            item = self.master_data.delete(request.param("type"), request.param("id"))
            return {"message": "Master data deleted successfully", "data": item}

        return self._handle("delete master data", _delete)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _body(request: Request) -> Dict[str, Any]:
        try:
            body = request.json()
        except ValueError as e:
            raise ValidationError("Invalid JSON body", details=str(e)) from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    def _handle(self, action: str, operation: Callable[[], Dict[str, Any]]) -> JsonResponse:
        """Run a handler body and map exceptions to responses."""
        try:
            return JsonResponse(operation())
        except ValidationError as e:
            body: Dict[str, Any] = {"error": str(e)}
            if e.details:
                body["details"] = e.details
            return JsonResponse(body, 400)
        except NotFoundError as e:
            return JsonResponse({"error": str(e)}, 404)
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": action})
            return JsonResponse(
                {"error": f"Failed to {action}: {e}", "details": type(e).__name__},
                500,
            )
