from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

PROMPTS_KEY = "prompts"
ID_FIELD = "id"
CREATED_AT_FIELD = "createdAt"


def now_millis() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass
class PromptDocument:
    """The on-disk root: {"prompts": {<id>: <record>}} plus any other top-level keys."""

    prompts: dict[str, dict] = field(default_factory=dict)
    extra: dict = field(default_factory=dict)
    # non-object entries under "prompts", written back untouched
    malformed: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data) -> PromptDocument:
        if not isinstance(data, dict):
            return cls()
        raw_prompts = data.get(PROMPTS_KEY)
        prompts: dict[str, dict] = {}
        malformed: dict = {}
        if isinstance(raw_prompts, dict):
            for key, record in raw_prompts.items():
                if isinstance(record, dict):
                    prompts[key] = record
                else:
                    logger.warning("Skipping malformed prompt record: %s", key)
                    malformed[key] = record
        extra = {k: v for k, v in data.items() if k != PROMPTS_KEY}
        return cls(prompts=prompts, extra=extra, malformed=malformed)

    def to_dict(self) -> dict:
        return {**self.extra, PROMPTS_KEY: {**self.malformed, **self.prompts}}

    def has(self, prompt_id: str) -> bool:
        return prompt_id in self.prompts or prompt_id in self.malformed

    def record(self, prompt_id: str) -> dict | None:
        """Return the stored record for prompt_id with its id backfilled."""
        record = self.prompts.get(prompt_id)
        if record is None:
            return None
        if ID_FIELD not in record:
            record[ID_FIELD] = prompt_id
        return record


@dataclass
class OperationResult:
    """Outcome of a mutating request, delivered to window.promptOperationResult."""

    operation: str  # "add", "update", "delete"
    success: bool = True
    error: str | None = None

    @classmethod
    def ok(cls, operation: str) -> OperationResult:
        return cls(operation=operation)

    @classmethod
    def failed(cls, operation: str, error: str) -> OperationResult:
        return cls(operation=operation, success=False, error=error)

    def to_dict(self) -> dict:
        result = {"success": self.success, "operation": self.operation}
        if self.error is not None:
            result["error"] = self.error
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass
class BridgeMessage:
    """A raw webview message of the form "<type>:<content>"."""

    type: str
    content: str = ""

    @classmethod
    def parse(cls, raw: str) -> BridgeMessage:
        type_, sep, content = raw.partition(":")
        return cls(type=type_.strip(), content=content if sep else "")
