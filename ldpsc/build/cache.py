# -*- coding: utf-8 -*-
"""
Build cache for preload libraries.

Two layers:
    Generated source (.c) -> Shared Lib (.so)

The .c file is only rewritten when its content changes, and the .so is only
rebuilt when the .c file is newer than it or when it was built with a
different compiler or flags.

Bookkeeping files (the build lock and the recorded compile command) live in
a state directory keyed by the library path, never next to the library:
``$LDPSC_CACHE_DIR`` if set, else ``<tmp>/ldpsc``.
"""

import hashlib
import os
import tempfile


def get_state_dir() -> str:
    return os.environ.get('LDPSC_CACHE_DIR') or os.path.join(tempfile.gettempdir(), 'ldpsc')


def get_state_path(so_file: str, suffix: str) -> str:
    """Bookkeeping file for so_file, e.g. get_state_path(lib, '.lock')"""
    so_path = os.path.abspath(so_file)
    key = hashlib.sha256(so_path.encode('utf-8')).hexdigest()[:16]
    name = f"{os.path.basename(so_path)}-{key}{suffix}"
    return os.path.join(get_state_dir(), name)


def command_digest(parts) -> str:
    """Stable digest of a compiler invocation (compiler, flags, ...)"""
    return hashlib.sha256('\0'.join(parts).encode('utf-8')).hexdigest()


class BuildCache:
    """Timestamp and command checks for incremental builds"""

    @staticmethod
    def write_if_changed(path: str, content: str) -> bool:
        """
        Write content to path unless the file already holds exactly it.

        Keeping the file untouched preserves its mtime, so an up-to-date
        shared library is not rebuilt.

        Args:
            path: Destination file
            content: Text to write

        Returns:
            bool: True if the file was (re)written
        """
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                if f.read() == content:
                    return False

        output_dir = os.path.dirname(path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return True

    @staticmethod
    def check_so_needs_rebuild(so_file: str, c_file: str) -> bool:
        """
        Check if the shared library must be rebuilt from c_file.

        Returns:
            bool: True if .so is missing or older than the source
        """
        if not os.path.exists(so_file):
            return True
        if not os.path.exists(c_file):
            return True
        return os.path.getmtime(c_file) > os.path.getmtime(so_file)

    @staticmethod
    def check_command_changed(cmd_file: str, digest: str) -> bool:
        """
        Check if the library was built by a different command.

        Args:
            cmd_file: Recorded digest of the last successful build
            digest: Digest of the build about to run

        Returns:
            bool: True if nothing is recorded or the digests differ
        """
        if not os.path.exists(cmd_file):
            return True
        with open(cmd_file, 'r', encoding='utf-8') as f:
            return f.read().strip() != digest

    @staticmethod
    def record_command(cmd_file: str, digest: str):
        """Remember the digest of a successful build."""
        state_dir = os.path.dirname(cmd_file)
        if state_dir:
            os.makedirs(state_dir, exist_ok=True)
        with open(cmd_file, 'w', encoding='utf-8') as f:
            f.write(digest + '\n')

    @staticmethod
    def invalidate(*files):
        """Delete cached files if they exist, ignoring errors."""
        for f in files:
            if f and os.path.exists(f):
                try:
                    os.remove(f)
                except OSError:
                    pass
