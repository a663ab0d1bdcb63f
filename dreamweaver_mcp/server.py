#!/usr/bin/env python3
# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver MCP Server

Tools are organized into domain modules under dreamweaver_mcp/tools/.
Importing each module registers its tools via the @tool() decorator.

4 tools across 1 module:
- dreams: dreamweaver_record, dreamweaver_journal, dreamweaver_insights,
          dreamweaver_analysis_status
"""

import atexit
import importlib
import logging

from dreamweaver_mcp._app import mcp, shutdown_executor

logger = logging.getLogger("dreamweaver.server")

# Map of module name -> import path
_MODULE_IMPORTS = {
    "dreams": "dreamweaver_mcp.tools.dreams",
}

_loaded_modules: list[str] = []

for _mod_name, _import_path in _MODULE_IMPORTS.items():
    importlib.import_module(_import_path)
    _loaded_modules.append(_mod_name)

logger.info("%d tool modules loaded: %s", len(_loaded_modules), ", ".join(_loaded_modules))

atexit.register(shutdown_executor)


if __name__ == "__main__":
    mcp.run()
