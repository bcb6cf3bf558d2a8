"""
tagmem

Categorized, tagged memory for AI assistants, served over MCP.

Quick Start:
    from tagmem import MemoryStore

    store = MemoryStore(global_root, local_root)
    store.remember("dev", "Uses 2-space indentation", ["style"], is_global=True)
    store.retrieve("dev", is_global=True)   # {"style": ["Uses 2-space indentation"]}
    store.retrieve_all(is_global=True)      # {"dev": ["Uses 2-space indentation"]}

CLI Usage:
    tagmem                         # MCP stdio server
    tagmem remember dev "Uses eslint" -t tools --global
    tagmem recall --global

Storage:
    One ``<category>.txt`` per category, under a global root
    (~/.config/goose/memory) and a local root (./.goose/memory).

Environment Variables:
    TAGMEM_GLOBAL_STORAGE  - Override the global root
    TAGMEM_LOCAL_STORAGE   - Override the local root
    TAGMEM_PERSISTENCE     - "0" to skip creating roots at startup
    TAGMEM_HOME            - Config file and logs (default: ~/.tagmem)
    TAGMEM_VERBOSE         - "1" for debug logging to stderr
"""

from .config import MemoryConfig, load_memory_config
from .errors import ConfigError, InvalidCategoryError, TagmemError
from .store import MemoryStore

__version__ = "0.1.0"
__all__ = [
    "MemoryStore",
    "MemoryConfig",
    "load_memory_config",
    "TagmemError",
    "InvalidCategoryError",
    "ConfigError",
]
