"""
Input and output helpers for the command line

'-' stands for stdin when reading and stdout when writing. Files are written
through a temporary sibling that is renamed into place, so a reader never
sees a half-written source file.
"""

import os
import sys
import tempfile

STDIO = '-'


def read_input(path: str = STDIO) -> bytes:
    """Read the whole prototype buffer from path or stdin."""
    if path == STDIO:
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()


def write_output(text: str, path: str = STDIO):
    """Write generated text to path or stdout, unchanged.

    Args:
        text: Complete output text
        path: Destination file, or '-' for stdout
    """
    if path == STDIO:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    output_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(output_dir, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=output_dir, prefix='.ldpsc-', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
