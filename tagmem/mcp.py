"""
MCP stdio server for tagmem: categorized, tagged memory for AI agents.

Exposes MemoryStore operations as four MCP tools:

    remember_memory         append a memory to a category
    retrieve_memories       one category (grouped by tags) or "*" (all, flattened)
    remove_memory_category  delete a category, or "*" for the whole area
    remove_specific_memory  delete blocks containing a text fragment

Usage:
    tagmem                                  # stdio server
    claude mcp add tagmem -- tagmem -g ~/.config/goose/memory

All store calls are serialized through a single asyncio.Lock.
"""

import asyncio
import json
import logging
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from .config import MemoryConfig, initialize_storage, load_memory_config
from .errors import TagmemError
from .instructions import render_instructions
from .store import MemoryStore, area_name

logger = logging.getLogger(__name__)

SERVER_NAME = "tagmem"
ALL_CATEGORIES = "*"

_store: Optional[MemoryStore] = None
_lock = asyncio.Lock()


def _get_store() -> MemoryStore:
    """Lazy-init the store from the environment/config file.

    Must be called inside ``async with _lock``.
    """
    global _store
    if _store is None:
        config = load_memory_config()
        _store = MemoryStore(config.global_storage, config.local_storage)
    return _store


def _fail(action: str, e: Exception) -> ToolError:
    logger.error("Error %s: %s", action, e)
    return ToolError(f"Error: {e}")


# ---------------------------------------------------------------------------
# Tool annotations
# ---------------------------------------------------------------------------

_READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False)
_APPEND = ToolAnnotations(destructiveHint=False, idempotentHint=False)
_DESTRUCTIVE = ToolAnnotations(destructiveHint=True, idempotentHint=True)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


async def remember_memory(
    category: Annotated[str, Field(
        min_length=1, description="The category to store the memory in",
    )],
    data: Annotated[str, Field(
        min_length=1, description="The data to store in memory",
    )],
    is_global: Annotated[bool, Field(
        description="Whether to store in global or local memory",
    )],
    tags: Annotated[Optional[list[str]], Field(
        description="Optional tags for categorizing the memory",
    )] = None,
) -> str:
    """Store a memory."""
    logger.info("Storing memory in category: %s, isGlobal: %s", category, is_global)
    async with _lock:
        try:
            _get_store().remember(category, data, tags or [], is_global)
        except (TagmemError, OSError) as e:
            raise _fail("storing memory", e) from e
    return f"Stored memory in category: {category}"


async def retrieve_memories(
    category: Annotated[str, Field(
        min_length=1,
        description="The category to retrieve memories from, use '*' for all categories",
    )],
    is_global: Annotated[bool, Field(
        description="Whether to retrieve from global or local memory",
    )],
) -> str:
    """Retrieve memories as JSON."""
    logger.info("Retrieving memories from category: %s, isGlobal: %s", category, is_global)
    async with _lock:
        store = _get_store()
        try:
            if category == ALL_CATEGORIES:
                memories = store.retrieve_all(is_global)
            else:
                memories = store.retrieve(category, is_global)
        except (TagmemError, OSError) as e:
            raise _fail("retrieving memories", e) from e
    return json.dumps(memories, indent=2, ensure_ascii=False)


async def remove_memory_category(
    category: Annotated[str, Field(
        min_length=1, description="The category to remove, use '*' for all categories",
    )],
    is_global: Annotated[bool, Field(
        description="Whether to remove from global or local memory",
    )],
) -> str:
    """Remove a category, or every category in an area."""
    logger.info("Removing memory category: %s, isGlobal: %s", category, is_global)
    async with _lock:
        store = _get_store()
        try:
            if category == ALL_CATEGORIES:
                store.clear_all(is_global)
                return f"Cleared all {area_name(is_global)} memory categories"
            store.clear_memory(category, is_global)
        except (TagmemError, OSError) as e:
            raise _fail("removing memory category", e) from e
    return f"Cleared memories in category: {category}"


async def remove_specific_memory(
    category: Annotated[str, Field(
        min_length=1, description="The category containing the memory to remove",
    )],
    memory_content: Annotated[str, Field(
        min_length=1, description="Content of the memory to remove (partial match)",
    )],
    is_global: Annotated[bool, Field(
        description="Whether to remove from global or local memory",
    )],
) -> str:
    """Remove memories matching a text fragment."""
    logger.info("Removing specific memory from category: %s, isGlobal: %s", category, is_global)
    async with _lock:
        try:
            _get_store().remove_specific_memory(category, memory_content, is_global)
        except (TagmemError, OSError) as e:
            raise _fail("removing specific memory", e) from e
    return f"Removed specific memory from category: {category}"


TOOLS = (
    (remember_memory,
     "Stores a memory with optional tags in a specified category",
     _APPEND),
    (retrieve_memories,
     "Retrieves all memories from a specified category",
     _READ_ONLY),
    (remove_memory_category,
     "Removes all memories within a specified category",
     _DESTRUCTIVE),
    (remove_specific_memory,
     "Removes a specific memory within a specified category",
     _DESTRUCTIVE),
)


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------


def create_server(instructions: Optional[str] = None) -> FastMCP:
    """Build a FastMCP server with the memory tools registered."""
    server = FastMCP(SERVER_NAME, instructions=instructions)
    for fn, description, annotations in TOOLS:
        server.add_tool(fn, description=description, annotations=annotations)
    return server


def main(config: Optional[MemoryConfig] = None):
    """Run the MCP stdio server."""
    import os
    import signal
    # anyio's stdin reader shields the blocking readline from cancellation,
    # so the first Ctrl+C would otherwise be swallowed.
    signal.signal(signal.SIGINT, lambda *_: os._exit(130))

    global _store
    if config is None:
        config = load_memory_config()
    initialize_storage(config)
    _store = MemoryStore(config.global_storage, config.local_storage)

    logger.info("MCP Memory Server started")
    logger.info("Global storage location: %s", config.global_storage)
    logger.info("Local storage location: %s", config.local_storage)

    server = create_server(render_instructions(_store))
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
