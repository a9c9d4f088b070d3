# vps_setup/common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

module_logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
PRIVATE_DIR_MODE = 0o700


def atomic_write_executable(
    target_path: Path,
    content: str,
    mode: int = EXECUTABLE_MODE,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Write `content` to `target_path` so that readers never see a partial file.

    The data goes to a temporary file in the same directory, which is
    flushed, made executable and then renamed over the target.

    Args:
        target_path: Final location of the file.
        content: Text to write.
        mode: Permission bits applied before the rename.
        current_logger: Optional logger instance.

    Returns:
        The target path.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    logger_to_use = current_logger if current_logger else module_logger
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as tmp_file:
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger_to_use.debug(f"Wrote {target_path} (mode {oct(mode)})")
    return target_path


def ensure_private_directory(
    directory: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Create `directory` if needed and verify that only we can write to it.

    The directory must be owned by the effective user and must not be
    writable by group or others. Files found in a directory that fails this
    check may have been planted by another account.

    Raises:
        PermissionError: If the directory has the wrong owner or mode.
        OSError: If it cannot be created or inspected.
    """
    logger_to_use = current_logger if current_logger else module_logger
    directory = Path(directory)
    directory.mkdir(mode=PRIVATE_DIR_MODE, parents=True, exist_ok=True)

    info = directory.stat()
    if info.st_uid != os.geteuid():
        raise PermissionError(
            f"{directory} is owned by uid {info.st_uid}, expected {os.geteuid()}"
        )
    if info.st_mode & (stat.S_IWGRP | stat.S_IWOTH):
        raise PermissionError(
            f"{directory} is writable by group or others (mode {oct(stat.S_IMODE(info.st_mode))})"
        )

    logger_to_use.debug(f"Handler directory {directory} is private")
    return directory
