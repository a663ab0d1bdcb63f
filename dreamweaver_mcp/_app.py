# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Shared FastMCP application instance and tool registration.

All sync tool handlers are wrapped in async def + run_in_executor so a
slow dream analysis doesn't block the MCP event loop. The raw sync
function is kept in _TOOL_REGISTRY so the CLI and tests can call tools
directly.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor

from mcp.server.fastmcp import FastMCP

from core.paths import get_paths

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

mcp = FastMCP("dreamweaver")

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="dreamweaver-tool")

logger = logging.getLogger("dreamweaver.app")

# Keys are the function name (e.g. "dreamweaver_record"), values the raw sync callable.
_TOOL_REGISTRY: dict = {}


def configure_logging(level: int = logging.INFO) -> None:
    """Central logging config — all dreamweaver.* loggers route to the data-dir log.

    stdout belongs to the MCP stdio transport, so nothing goes to a stream handler.
    """
    log_path = get_paths().log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[
            logging.FileHandler(str(log_path), encoding="utf-8"),
        ],
    )


def tool():
    """Decorator replacing @mcp.tool().

    - Always stores the raw sync function in _TOOL_REGISTRY.
    - Wraps sync functions in async def + run_in_executor for MCP registration.
    """
    def decorator(fn):
        name = fn.__name__
        _TOOL_REGISTRY[name] = fn

        if not asyncio.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(**kwargs):
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(
                    _executor, lambda: fn(**kwargs)
                )
            register_fn = async_wrapper
        else:
            register_fn = fn
        mcp.tool()(register_fn)
        return fn

    return decorator


def get_tool(name: str):
    """Raw sync tool function by name (KeyError if not registered)."""
    return _TOOL_REGISTRY[name]


def shutdown_executor() -> None:
    """Graceful shutdown of the tool executor pool."""
    _executor.shutdown(wait=False)
    logger.info("Tool executor pool shut down")
