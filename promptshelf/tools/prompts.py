import json

from ..errors import PromptShelfError
from ..storage import PromptStore


def register_tools(mcp, store: PromptStore) -> None:
    @mcp.tool()
    def prompt_list() -> str:
        """List all prompts, most recently created first."""
        return json.dumps(store.list_prompts(), ensure_ascii=False)

    @mcp.tool()
    def prompt_get(id: str) -> str:
        """Get a prompt by id."""
        prompt = store.get_prompt(id)
        if prompt is None:
            raise PromptShelfError.not_found(id)
        return json.dumps(prompt, ensure_ascii=False)

    @mcp.tool()
    def prompt_add(
        id: str,
        content: str,
        name: str | None = None,
        fields: dict | None = None,
    ) -> str:
        """Add a new prompt. Extra fields are stored alongside name and content."""
        prompt = dict(fields or {})
        prompt.update({"id": id, "content": content})
        if name is not None:
            prompt["name"] = name
        record = store.add_prompt(prompt)
        result = {"status": "added", "id": id, "createdAt": record["createdAt"]}
        return json.dumps(result)

    @mcp.tool()
    def prompt_update(id: str, updates: dict) -> str:
        """Merge fields into a prompt. A null value removes that field."""
        record = store.update_prompt(id, updates)
        return json.dumps(record, ensure_ascii=False)

    @mcp.tool()
    def prompt_delete(id: str) -> str:
        """Delete a prompt by id."""
        if not store.delete_prompt(id):
            raise PromptShelfError.not_found(id)
        result = {"status": "deleted", "id": id}
        return json.dumps(result)
