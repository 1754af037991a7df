# proptree/utils.py
"""
proptree.utils
--------------

Shared utility functions for path handling and reading input buffers.
"""

import io
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union


def expand_path(path: Optional[str]) -> Optional[str]:
    """Expand ~ and environment variables in a path string.

    Args:
        path: Path string to expand, or None.

    Returns:
        Expanded path string, or None if input was None.

    Examples:
        >>> expand_path("~/conf/app.properties")
        '/home/user/conf/app.properties'
        >>> expand_path(None)
        None
    """
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(path))


def resolve_path(path: Optional[str]) -> Optional[Path]:
    """Expand and resolve a path to an absolute Path object.

    Returns:
        Absolute resolved Path, or None if input was None.
    """
    if path is None:
        return None
    return Path(expand_path(path)).resolve()


def iter_lines(data: Union[bytes, bytearray, memoryview, str, BinaryIO], encoding: Optional[str] = None) -> Iterator[str]:
    """Yield the lines of a buffer without their terminators.

    ``data`` may be bytes-like, a binary file object (read to the end first),
    or an already decoded ``str``. Bytes are decoded with ``encoding``, or the
    platform's preferred encoding when it is None. ``\\n``, ``\\r\\n`` and
    ``\\r`` all end a line.
    """
    if isinstance(data, str):
        stream = io.StringIO(data, newline=None)
    else:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = data.read()
        stream = io.TextIOWrapper(io.BytesIO(bytes(data)), encoding=encoding, newline=None)

    with stream:
        for line in stream:
            yield line[:-1] if line.endswith("\n") else line
