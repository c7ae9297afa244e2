from mcp.server.fastmcp import FastMCP

from .storage import PromptStore
from .tools.prompts import register_tools as register_prompt_tools

mcp = FastMCP("promptshelf")
store = PromptStore()
register_prompt_tools(mcp, store)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
