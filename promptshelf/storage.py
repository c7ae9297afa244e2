"""JSON-file backed prompt library.

Every operation reads the whole document, mutates it and writes it back.
Nothing is cached between calls and there is no locking, so two writers
racing on the same file can lose an update (last writer wins).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

from .errors import PromptShelfError
from .models import CREATED_AT_FIELD, ID_FIELD, PromptDocument, now_millis
from .paths import ConfigPaths

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({ID_FIELD, CREATED_AT_FIELD})


def _created_at(record: dict) -> int:
    value = record.get(CREATED_AT_FIELD)
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


class PromptStore:
    def __init__(self, path: Path | None = None, paths: ConfigPaths | None = None):
        self.paths = paths or ConfigPaths()
        self.path = Path(path) if path is not None else self.paths.prompt_file

    def read_document(self) -> PromptDocument:
        """Load the document, treating a missing or unreadable file as empty."""
        if not self.path.exists():
            return PromptDocument()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", self.path, e)
            return PromptDocument()
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: root is not a JSON object", self.path)
        return PromptDocument.from_dict(data)

    def write_document(self, doc: PromptDocument) -> None:
        try:
            if self.path == self.paths.prompt_file:
                self.paths.ensure_config_directory()
            else:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(doc.to_dict(), handle, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning("Failed to write %s: %s", self.path, e)
            raise PromptShelfError.io_failure(str(e)) from e
        logger.debug("Wrote %s", self.path)

    def list_prompts(self) -> list[dict]:
        """All prompts, most recently created first."""
        doc = self.read_document()
        result = [doc.record(key) for key in doc.prompts]
        result.sort(key=_created_at, reverse=True)
        logger.debug("Loaded %d prompts from %s", len(result), self.path)
        return result

    def get_prompt(self, prompt_id: str) -> dict | None:
        return self.read_document().record(prompt_id)

    def add_prompt(self, prompt: Mapping) -> dict:
        if not isinstance(prompt, Mapping):
            raise PromptShelfError.invalid_record("expected an object")
        if prompt.get(ID_FIELD) is None:
            raise PromptShelfError.missing_id()

        doc = self.read_document()
        prompt_id = str(prompt[ID_FIELD])
        if doc.has(prompt_id):
            raise PromptShelfError.already_exists(prompt_id)

        record = dict(prompt)
        if CREATED_AT_FIELD not in record:
            record[CREATED_AT_FIELD] = now_millis()
        doc.prompts[prompt_id] = record

        self.write_document(doc)
        logger.debug("Added prompt: %s", prompt_id)
        return record

    def update_prompt(self, prompt_id: str, updates: Mapping) -> dict:
        """Merge updates into a stored prompt field by field.

        id and createdAt are skipped. A None value removes the field; the
        merge is one level deep, nested None values are stored as-is.
        """
        doc = self.read_document()
        if prompt_id not in doc.prompts:
            raise PromptShelfError.not_found(prompt_id)

        record = doc.prompts[prompt_id]
        for key, value in updates.items():
            if key in IMMUTABLE_FIELDS:
                continue
            if value is None:
                record.pop(key, None)
            else:
                record[key] = value

        self.write_document(doc)
        logger.debug("Updated prompt: %s", prompt_id)
        return doc.record(prompt_id)

    def delete_prompt(self, prompt_id: str) -> bool:
        doc = self.read_document()
        if not doc.has(prompt_id):
            logger.debug("Prompt not found: %s", prompt_id)
            return False

        doc.prompts.pop(prompt_id, None)
        doc.malformed.pop(prompt_id, None)
        self.write_document(doc)
        logger.debug("Deleted prompt: %s", prompt_id)
        return True
