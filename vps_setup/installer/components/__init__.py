"""
Component modules for the installer.

Each subpackage declares one or more components and registers them with
ComponentRegistry at import time. load_all_components() imports every
module below this package so that the registry is complete.
"""

import importlib
import logging
import pkgutil
from typing import List, Optional

module_logger = logging.getLogger(__name__)


def load_all_components(logger: Optional[logging.Logger] = None) -> List[str]:
    """
    Import all component modules to ensure they are registered.

    Importing twice is harmless: modules are only executed once.

    Returns:
        The names of the imported modules.
    """
    logger_to_use = logger or module_logger
    imported: List[str] = []
    for module_info in pkgutil.walk_packages(__path__, prefix=f"{__name__}."):
        importlib.import_module(module_info.name)
        imported.append(module_info.name)
        logger_to_use.debug(f"Imported component module: {module_info.name}")
    return imported
