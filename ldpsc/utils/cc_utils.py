"""
C compiler utilities for ldpsc

Builds the generated interceptor source into a shared library suitable for
LD_PRELOAD. Supports cc, gcc, clang and zig (including the pip-installable
``ziglang`` package) as compiler drivers.
"""

import os
import sys
import shutil
import subprocess
import time
from typing import List, Optional, Sequence
from contextlib import contextmanager

import fcntl

from ..build.cache import BuildCache, command_digest, get_state_path
from ..errors import BuildError
from ..logger import logger


@contextmanager
def file_lock(lockfile_path: str, timeout: float = 60.0):
    """Exclusive fcntl lock on lockfile_path, retried until timeout."""
    lockfile = None
    start_time = time.time()

    try:
        lock_dir = os.path.dirname(lockfile_path)
        if lock_dir and not os.path.exists(lock_dir):
            os.makedirs(lock_dir, exist_ok=True)

        while True:
            try:
                lockfile = open(lockfile_path, 'a')
                fcntl.flock(lockfile.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except (IOError, OSError):
                if lockfile:
                    lockfile.close()
                    lockfile = None

                if time.time() - start_time > timeout:
                    raise TimeoutError(
                        f"Failed to acquire lock on {lockfile_path} within {timeout}s"
                    )

                wait_time = min(0.01 * (2 ** min((time.time() - start_time) / 0.1, 5)), 0.5)
                time.sleep(wait_time)

        yield

    finally:
        if lockfile:
            fcntl.flock(lockfile.fileno(), fcntl.LOCK_UN)
            lockfile.close()


def _find_zig_executable() -> Optional[str]:
    """Find zig executable, including python-zig from ziglang package.

    Returns:
        Path to zig executable, 'ziglang-module' for ``python -m ziglang``,
        or None if not found
    """
    if shutil.which('zig'):
        return 'zig'

    if shutil.which('python-zig'):
        return 'python-zig'

    try:
        result = subprocess.run(
            [sys.executable, '-m', 'ziglang', 'version'],
            capture_output=True, text=True, timeout=5
        )
        if result.returncode == 0:
            return 'ziglang-module'
    except (OSError, subprocess.SubprocessError):
        pass

    return None


def _is_zig(compiler: str) -> bool:
    return compiler in ('zig', 'python-zig', 'ziglang-module')


def get_default_compilers() -> List[str]:
    """Compilers to try in order of preference: cc, gcc, clang, then zig"""
    compilers = ['cc', 'gcc', 'clang']
    zig = _find_zig_executable()
    if zig:
        compilers.append(zig)
    return compilers


def get_shared_lib_extension() -> str:
    return '.dylib' if sys.platform == 'darwin' else '.so'


def get_platform_flags(compiler: str = 'cc') -> List[str]:
    """Flags that turn a single C file into a preloadable shared library

    Args:
        compiler: Compiler being used (affects flag format)
    """
    if sys.platform == 'darwin':
        flags = ['-dynamiclib', '-fPIC']
    else:
        flags = ['-shared', '-fPIC']
    if sys.platform.startswith('linux') and not _is_zig(compiler):
        # dlsym lives in libdl on glibc < 2.34
        flags.append('-ldl')
    return flags


def build_compile_command(c_file: str, so_file: str, compiler: str = 'cc',
                          cflags: Sequence[str] = ()) -> List[str]:
    """Build the compiler command line.

    Args:
        c_file: Generated C source
        so_file: Output shared library path
        compiler: cc, gcc, clang, zig, python-zig, ziglang-module, ...
        cflags: Extra flags inserted before the source file

    Returns:
        Command as list of arguments
    """
    if compiler == 'zig':
        compiler_cmd = ['zig', 'cc']
    elif compiler == 'python-zig':
        compiler_cmd = ['python-zig', 'cc']
    elif compiler == 'ziglang-module':
        compiler_cmd = [sys.executable, '-m', 'ziglang', 'cc']
    else:
        compiler_cmd = [compiler]

    platform_flags = get_platform_flags(compiler)
    # Libraries must follow the source for single-pass linkers
    libs = [f for f in platform_flags if f.startswith('-l')]
    flags = [f for f in platform_flags if not f.startswith('-l')]

    return compiler_cmd + flags + list(cflags) + [c_file, '-o', so_file] + libs


def try_compile_with_compilers(c_file: str, so_file: str,
                               compilers: List[str],
                               cflags: Sequence[str] = ()) -> str:
    """Try compiling with each compiler until one succeeds.

    Returns:
        Path to the shared library

    Raises:
        BuildError: If all compilers fail
    """
    errors = []
    for compiler in compilers:
        if not _is_zig(compiler) and not shutil.which(compiler):
            errors.append(f"{compiler}: not found")
            continue

        cmd = build_compile_command(c_file, so_file, compiler=compiler, cflags=cflags)
        logger.debug("Compiling preload library", command=' '.join(cmd))
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
            return so_file
        except subprocess.CalledProcessError as e:
            errors.append(f"{compiler}: {e.stderr.strip()}")
            BuildCache.invalidate(so_file)

    raise BuildError(
        f"Failed to build shared library with all compilers ({', '.join(compilers)}):\n" +
        "\n".join(errors)
    )


def compile_shared_library(c_file: str, so_file: str,
                           compiler: Optional[str] = None,
                           cflags: Sequence[str] = ()) -> str:
    """Compile generated interceptor source into a shared library.

    Args:
        c_file: Path to the generated .c file
        so_file: Output library path
        compiler: Compiler to try first (default: auto-detect, tries several)
        cflags: Extra compiler flags

    Returns:
        Path to the shared library

    Raises:
        FileNotFoundError: If c_file does not exist
        BuildError: If compilation fails
    """
    if not os.path.exists(c_file):
        raise FileNotFoundError(f"C source not found: {c_file}")

    output_dir = os.path.dirname(so_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)

    # Reuse a library only if it was built with the same compiler request and flags
    digest = command_digest([compiler or ''] + list(cflags))
    cmd_file = get_state_path(so_file, '.cmd')

    # Concurrent builds of the same library must not interleave
    with file_lock(get_state_path(so_file, '.lock')):
        if (not BuildCache.check_so_needs_rebuild(so_file, c_file)
                and not BuildCache.check_command_changed(cmd_file, digest)):
            logger.debug("Preload library up to date", so_file=so_file)
            return so_file

        if compiler:
            compilers = [compiler] + [c for c in get_default_compilers() if c != compiler]
        else:
            compilers = get_default_compilers()

        try:
            result = try_compile_with_compilers(c_file, so_file, compilers, cflags=cflags)
        except BuildError:
            BuildCache.invalidate(cmd_file)
            raise
        BuildCache.record_command(cmd_file, digest)
        return result
