"""Testing fakes – InMemorySearchTransport."""
from __future__ import annotations

import copy
import dataclasses
from typing import Any

from mp_search.kernel.errors import SearchTransportError


@dataclasses.dataclass(frozen=True)
class RecordedCall:
    operation: str
    index: str | None
    document_type: str | None = None
    body: dict[str, Any] | None = None
    id: str | None = None
    scroll: str | None = None


class InMemorySearchTransport:
    """Records every call and answers with canned responses.

    ``responses`` maps operation name (``"search"``, ``"get_document"`` …) to
    the response returned for it; a list is consumed one item per call.
    Setting ``fail_with`` makes every call raise that error instead.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        fail_with: SearchTransportError | None = None,
    ) -> None:
        self._responses: dict[str, Any] = dict(responses or {})
        self.fail_with = fail_with
        self._calls: list[RecordedCall] = []

    @property
    def calls(self) -> list[RecordedCall]:
        return list(self._calls)

    def of_operation(self, operation: str) -> list[RecordedCall]:
        return [c for c in self._calls if c.operation == operation]

    def respond(self, operation: str, response: Any) -> None:
        self._responses[operation] = response

    def clear(self) -> None:
        self._calls.clear()

    async def search(
        self, index: str, document_type: str, body: dict[str, Any], scroll: str | None = None
    ) -> dict[str, Any]:
        return self._record(RecordedCall("search", index, document_type, body, scroll=scroll))

    async def index_document(
        self, index: str, document_type: str, body: dict[str, Any], id: str | None = None
    ) -> dict[str, Any]:
        return self._record(RecordedCall("index_document", index, document_type, body, id=id))

    async def get_document(self, index: str, document_type: str, id: str) -> dict[str, Any]:
        return self._record(RecordedCall("get_document", index, document_type, id=id))

    async def update_document(
        self, index: str, document_type: str, id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        return self._record(RecordedCall("update_document", index, document_type, body, id=id))

    async def delete_document(self, index: str, document_type: str, id: str) -> dict[str, Any]:
        return self._record(RecordedCall("delete_document", index, document_type, id=id))

    async def get_settings(self, index: str) -> dict[str, Any]:
        return self._record(RecordedCall("get_settings", index))

    async def put_settings(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._record(RecordedCall("put_settings", index, body=body))

    async def get_mapping(self, index: str, document_type: str | None = None) -> dict[str, Any]:
        return self._record(RecordedCall("get_mapping", index, document_type))

    async def put_mapping(self, index: str, document_type: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._record(RecordedCall("put_mapping", index, document_type, body))

    async def create_index(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._record(RecordedCall("create_index", index, body=body))

    async def get_index(self, index: str) -> dict[str, Any]:
        return self._record(RecordedCall("get_index", index))

    async def delete_index(self, index: str) -> dict[str, Any]:
        return self._record(RecordedCall("delete_index", index))

    def _record(self, call: RecordedCall) -> dict[str, Any]:
        self._calls.append(dataclasses.replace(call, body=copy.deepcopy(call.body)))
        if self.fail_with is not None:
            raise self.fail_with
        response = self._responses.get(call.operation, {"acknowledged": True})
        if isinstance(response, list):
            response = response.pop(0) if response else {}
        return copy.deepcopy(response)


__all__ = ["InMemorySearchTransport", "RecordedCall"]
