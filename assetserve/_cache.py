"""
This module implements the asset cache: a scan of a directory tree that
loads every file into memory, together with its Brotli-compressed body
and a sha256 digest. The scan runs once at startup; the resulting cache
is read-only.
"""

import os
import hashlib
from collections import namedtuple
from collections.abc import Mapping

import brotli

from ._compat import run_in_thread, wait_for_all_or_cancel_the_rest
from ._config import get_mimetype
from ._logging import logger


# The kinds of directory entries that we distinguish
FILE = "file"
DIRECTORY = "directory"
OTHER = "other"


class FilesystemError(IOError):
    """ An error raised when a directory or file of the asset tree cannot
    be read. Subclass of IOError. The original error is available as
    ``__cause__``.
    """


class CacheEntry(
    namedtuple("CacheEntry", ["key", "mimetype", "body", "compressed_body", "digest"])
):
    """ An immutable record representing one cached asset. Fields:

    * ``key``: the path relative to the root dir, using forward slashes.
    * ``mimetype``: the content-type to serve the asset with.
    * ``body``: the raw bytes of the file.
    * ``compressed_body``: the Brotli-compressed body.
    * ``digest``: the hex sha256 digest of the body.
    """

    __slots__ = ()

    @property
    def etag(self):
        """ The (strong) etag for this asset: the digest wrapped in quotes.
        """
        return f'"{self.digest}"'


class AssetCache(Mapping):
    """ A read-only mapping of keys to ``CacheEntry`` objects. Use
    ``build_cache()`` to create one.
    """

    __slots__ = ("_root_dir", "_entries")

    def __init__(self, root_dir, entries):
        self._root_dir = root_dir
        self._entries = dict(entries)

    def __repr__(self):
        return f"<AssetCache with {len(self)} assets from {self._root_dir!r}>"

    def __getitem__(self, key):
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    @property
    def root_dir(self):
        """ The directory that the assets were loaded from.
        """
        return self._root_dir


def classify_entry(entry):
    """ Get the kind of the given ``os.DirEntry``: FILE, DIRECTORY or
    OTHER. Symlinks are not followed, so these are OTHER.
    """
    if entry.is_dir(follow_symlinks=False):
        return DIRECTORY
    elif entry.is_file(follow_symlinks=False):
        return FILE
    else:
        return OTHER


def to_key(root_dir, path):
    """ Get the cache key for a file: its path relative to root_dir,
    with forward slashes.
    """
    key = os.path.relpath(path, root_dir)
    if os.sep != "/":
        key = key.replace(os.sep, "/")
    return key.lstrip("/")


def _list_directory(path):
    with os.scandir(path) as it:
        return [(entry.name, classify_entry(entry)) for entry in it]


def _read_file(path):
    with open(path, "rb") as f:
        return f.read()


def _hexdigest(body):
    return hashlib.sha256(body).hexdigest()


async def build_cache(root_dir):
    """ Async function to scan the given directory and load all files in
    it (recursively) into an ``AssetCache``. Directories and files are
    processed concurrently. Raises ``FilesystemError`` if any directory
    or file cannot be read; in that case no cache is produced.
    """
    root_dir = os.path.abspath(root_dir)
    entries = {}
    await _cache_directory(root_dir, root_dir, entries)
    cache = AssetCache(root_dir, entries)

    nbytes = sum(len(entry.body) for entry in cache.values())
    nbytes_compressed = sum(len(entry.compressed_body) for entry in cache.values())
    logger.info(
        f"Cached {len(cache)} assets from {root_dir} "
        f"({nbytes} bytes, {nbytes_compressed} compressed)"
    )
    return cache


async def _cache_directory(root_dir, path, entries):
    try:
        dir_entries = await run_in_thread(_list_directory, path)
    except OSError as err:
        raise FilesystemError(f"Cannot read directory {path}: {err}") from err

    coroutines = []
    for name, kind in dir_entries:
        child_path = os.path.join(path, name)
        if kind == DIRECTORY:
            coroutines.append(_cache_directory(root_dir, child_path, entries))
        elif kind == FILE:
            coroutines.append(_cache_file(root_dir, child_path, entries))
        else:
            logger.warning(
                f"Unsupported directory entry {name}: "
                f"entries in {path} must be files or directories"
            )

    await wait_for_all_or_cancel_the_rest(*coroutines)


async def _cache_file(root_dir, path, entries):
    try:
        body = await run_in_thread(_read_file, path)
    except OSError as err:
        raise FilesystemError(f"Cannot read file {path}: {err}") from err

    compressed_body, digest = await wait_for_all_or_cancel_the_rest(
        run_in_thread(brotli.compress, body), run_in_thread(_hexdigest, body),
    )

    key = to_key(root_dir, path)
    entries[key] = CacheEntry(key, get_mimetype(path), body, compressed_body, digest)
