"""
Server instructions sent to the agent at MCP initialization.

The base text explains when to use the memory tools. At startup the
memories already saved in both areas are appended, so the agent starts
each session knowing them.
"""

import logging

from .store import MemoryStore

logger = logging.getLogger(__name__)


BASE_INSTRUCTIONS = """\
This server stores and retrieves categorized information with optional tags,
so that important details persist across sessions.

Capabilities:
1. Store information in a category, with optional tags for context.
2. Retrieve the memories of one category, or of all categories with "*".
3. Remove a single memory by partial text match.
4. Remove a whole category, or every category with "*".

Use the memory tools when the user shares things they will expect you to
remember: personal details and preferences, preferred development tools and
conventions, project configuration, recurring workflows and commands.

Protocol for storing:
1. Identify the piece of information worth keeping.
2. Ask the user whether they want it stored.
3. If they agree:
   - Suggest a category, e.g. "personal" for user data or "development"
     for project preferences.
   - Ask whether any tags should be applied.
   - Confirm the area: local for project-specific details ({local}),
     global for user-wide data ({global_}).
   - Call remember_memory(category, data, tags, is_global).

Keywords that suggest a memory tool: remember, forget, memory, save,
save memory, remove memory, clear memory, search memory, find memory.

Also suggest storing a memory when the user performs a routine task or runs
a command they would benefit from having remembered.
"""

MEMORIES_PREAMBLE = """\
**Here are the user's currently saved memories:**
Keep this information in mind when answering future questions.
Do not bring up memories unless relevant.
If the user has not saved any memories, this section is empty.
If the user removes a memory listed here, disregard it from then on.
"""


def format_memories(title: str, memories: dict[str, list[str]]) -> str:
    """Render one area's memories as a titled, per-category list."""
    if not memories:
        return ""
    lines = [f"{title}:"]
    for category, entries in memories.items():
        lines.append("")
        lines.append(f"Category: {category}")
        lines.extend(f"- {entry}" for entry in entries)
    return "\n".join(lines) + "\n"


def render_instructions(store: MemoryStore) -> str:
    """Base instructions plus every saved global and local memory.

    Read failures are logged and leave the instructions without the
    memory listing; they never prevent the server from starting.
    """
    text = BASE_INSTRUCTIONS.format(
        local=store.local_root,
        global_=store.global_root,
    )
    text += "\n" + MEMORIES_PREAMBLE

    try:
        for title, is_global in (("Global Memories", True), ("Local Memories", False)):
            section = format_memories(title, store.retrieve_all(is_global))
            if section:
                text += "\n" + section
    except Exception as e:
        logger.error("Error loading existing memories: %s", e)

    return text
