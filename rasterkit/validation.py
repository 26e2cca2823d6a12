"""Path helpers used to classify image files before decoding."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Union
from urllib.parse import urlparse


def has_url_scheme(path: Union[str, os.PathLike]) -> bool:
    """Return True if *path* is written as a URL, e.g. ``http://host/a.png``.

    Only the ``scheme://`` form counts.  A colon elsewhere in a file name
    (``shot:1.png``) or after a drive letter (``C:/images``) does not.
    """
    path_str = os.fspath(path)
    if "://" not in path_str:
        return False
    scheme = urlparse(path_str).scheme
    return len(scheme) > 1


def file_suffix(path: Union[str, os.PathLike]) -> str:
    """Return the extension of *path* without the leading dot.

    Only the text after the last dot of the final component counts, so
    ``"archive.tar.gz"`` yields ``"gz"``.  Case follows the host
    filesystem: folded on Windows, preserved on POSIX.  Returns ``""``
    when the name has no extension.
    """
    suffix = Path(os.fspath(path)).suffix
    return os.path.normcase(suffix[1:])
