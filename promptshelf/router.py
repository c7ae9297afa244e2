"""Maps prompt-library bridge messages onto PromptStore calls."""

from __future__ import annotations

import json
import logging

from .bridge import Bridge
from .errors import PromptShelfError
from .models import ID_FIELD, OperationResult
from .storage import PromptStore

logger = logging.getLogger(__name__)

UPDATE_PROMPTS = "updatePrompts"
OPERATION_RESULT = "promptOperationResult"


def _parse_object(content: str) -> dict:
    try:
        data = json.loads(content)
    except (TypeError, json.JSONDecodeError) as e:
        raise PromptShelfError.invalid_payload(str(e)) from e
    if not isinstance(data, dict):
        raise PromptShelfError.invalid_payload("expected a JSON object")
    return data


def _require(data: dict, name: str):
    value = data.get(name)
    if value is None:
        raise PromptShelfError.missing_field(name)
    return value


def _error_message(e: Exception) -> str:
    if isinstance(e, PromptShelfError):
        return e.message
    return str(e)


class PromptRequestRouter:
    """Handles get_prompts, add_prompt, update_prompt and delete_prompt.

    Failures never propagate out of handle(): a failed refresh delivers an
    empty list, a failed mutation delivers a promptOperationResult with
    success false. A successful mutation delivers its result followed by a
    refreshed list.
    """

    SUPPORTED_TYPES = ("get_prompts", "add_prompt", "update_prompt", "delete_prompt")

    def __init__(self, store: PromptStore, bridge: Bridge):
        self.store = store
        self.bridge = bridge

    @property
    def supported_types(self) -> tuple[str, ...]:
        return self.SUPPORTED_TYPES

    def handle(self, type_: str, content: str) -> bool:
        if type_ == "get_prompts":
            self._handle_get_prompts()
        elif type_ == "add_prompt":
            self._handle_add_prompt(content)
        elif type_ == "update_prompt":
            self._handle_update_prompt(content)
        elif type_ == "delete_prompt":
            self._handle_delete_prompt(content)
        else:
            return False
        return True

    def _handle_get_prompts(self) -> None:
        try:
            payload = json.dumps(self.store.list_prompts(), ensure_ascii=False)
        except Exception as e:
            logger.error("Failed to get prompts: %s", e, exc_info=True)
            payload = "[]"
        self.bridge.call_js(UPDATE_PROMPTS, payload)

    def _handle_add_prompt(self, content: str) -> None:
        try:
            prompt = _parse_object(content)
            self.store.add_prompt(prompt)
        except Exception as e:
            logger.error("Failed to add prompt: %s", e)
            self._send_result(OperationResult.failed("add", _error_message(e)))
            return
        self._refresh_and_report("add")

    def _handle_update_prompt(self, content: str) -> None:
        try:
            data = _parse_object(content)
            prompt_id = str(_require(data, ID_FIELD))
            updates = _require(data, "updates")
            if not isinstance(updates, dict):
                raise PromptShelfError.invalid_payload("'updates' must be an object")
            self.store.update_prompt(prompt_id, updates)
        except Exception as e:
            logger.error("Failed to update prompt: %s", e)
            self._send_result(OperationResult.failed("update", _error_message(e)))
            return
        self._refresh_and_report("update")

    def _handle_delete_prompt(self, content: str) -> None:
        try:
            data = _parse_object(content)
            prompt_id = str(_require(data, ID_FIELD))
            deleted = self.store.delete_prompt(prompt_id)
        except Exception as e:
            logger.error("Failed to delete prompt: %s", e)
            self._send_result(OperationResult.failed("delete", _error_message(e)))
            return
        if deleted:
            self._refresh_and_report("delete")
        else:
            self._send_result(OperationResult.failed("delete", "Prompt not found"))

    def _refresh_and_report(self, operation: str) -> None:
        def refresh_then_report() -> None:
            self._handle_get_prompts()
            self.bridge.call_js_now(OPERATION_RESULT, OperationResult.ok(operation).to_json())

        self.bridge.invoke_later(refresh_then_report)

    def _send_result(self, result: OperationResult) -> None:
        self.bridge.call_js(OPERATION_RESULT, result.to_json())
