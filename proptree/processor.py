# proptree/processor.py
"""
proptree.processor
------------------

Entry points that pick a reader from configuration.

``PropertiesProcessor.process`` takes a configuration mapping and a raw
buffer and returns a document:

    - ``hierarchical`` (default False): nest dotted keys
      (`proptree.hierarchical`) or keep them flat (`proptree.flat`).
    - ``raw-data`` (default False): keep values as strings.
    - ``encoding`` (optional): text encoding of the buffer.

``load_file`` does the same for a file on disk.
"""

import logging
import os
from typing import Any, Mapping, Optional

from . import flat, hierarchical
from .utils import resolve_path

log = logging.getLogger(__name__)

_READERS = {
    True: hierarchical.parse,
    False: flat.parse,
}


def _flag(configuration: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = configuration.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class PropertiesProcessor:
    """Turns properties content into a document according to a configuration mapping."""

    name = "properties"

    def process(self, configuration: Optional[Mapping[str, Any]], data, provenance=None) -> dict:
        """
        Parse ``data`` with the reader selected by ``configuration``.

        ``data`` (bytes-like or binary file object) is read completely before
        parsing starts. Errors from the reader propagate unchanged and no
        document is returned.
        """
        configuration = configuration or {}
        hierarchical_data = _flag(configuration, "hierarchical")
        raw_data = _flag(configuration, "raw-data")
        encoding = configuration.get("encoding")

        if not isinstance(data, (bytes, bytearray, memoryview, str)):
            data = data.read()

        reader = _READERS[hierarchical_data]
        log.debug(f"PropertiesProcessor.process: hierarchical={hierarchical_data} raw_data={raw_data} "
                  f"encoding={encoding or 'default'} ({len(data)} bytes)")
        return reader(raw_data, data, encoding, provenance)


def load_file(file_path: str,
              hierarchical: bool = True,
              raw_data: bool = False,
              encoding: Optional[str] = None,
              provenance=None) -> dict:
    """
    Load a properties file into a document.

    ``~`` and environment variables in ``file_path`` are expanded.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the content cannot be parsed.
    """
    path = resolve_path(file_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Properties file not found: {file_path}")

    with open(path, mode="rb") as f:
        data = f.read()
    log.debug(f"load_file: read {len(data)} bytes from {path}")

    configuration = {"hierarchical": hierarchical, "raw-data": raw_data, "encoding": encoding}
    return PropertiesProcessor().process(configuration, data, provenance)
