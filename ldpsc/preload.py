"""
Preload launcher - run a command with the interceptor library preloaded

The dynamic loader picks the library up from LD_PRELOAD (glibc, musl) or
DYLD_INSERT_LIBRARIES (macOS). An existing preload list is kept and the
interceptor library is put in front of it.
"""

import os
import sys
import subprocess
from typing import Dict, List, Mapping, Optional, Sequence

from .logger import logger


def preload_variable() -> str:
    """Name of the loader's preload environment variable on this platform"""
    if sys.platform == 'darwin':
        return 'DYLD_INSERT_LIBRARIES'
    return 'LD_PRELOAD'


def get_preload_env(library: str, env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Environment for a child process with library preloaded.

    Args:
        library: Path to the interceptor shared library
        env: Base environment (default: os.environ)

    Returns:
        New environment dict; the base mapping is not modified
    """
    result = dict(os.environ if env is None else env)
    library = os.path.abspath(library)
    var = preload_variable()

    existing = result.get(var, '')
    result[var] = f"{library}:{existing}" if existing else library
    if sys.platform == 'darwin':
        result['DYLD_FORCE_FLAT_NAMESPACE'] = '1'
    return result


def run_with_preload(library: str, command: Sequence[str],
                     env: Optional[Mapping[str, str]] = None) -> int:
    """Run command with library preloaded and wait for it.

    Args:
        library: Path to the interceptor shared library
        command: Program and arguments
        env: Base environment (default: os.environ)

    Returns:
        Exit status of the command

    Raises:
        ValueError: If command is empty
        FileNotFoundError: If library or the program does not exist
    """
    if not command:
        raise ValueError("no command given to run")
    if not os.path.exists(library):
        raise FileNotFoundError(f"Preload library not found: {library}")

    child_env = get_preload_env(library, env)
    argv: List[str] = list(command)
    logger.debug("Launching with preload", command=argv,
                 preload=child_env[preload_variable()])
    completed = subprocess.run(argv, env=child_env)
    return completed.returncode
