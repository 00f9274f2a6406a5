"""
Command line front end

    ldpsc generate [INPUT] [-o OUT] [--log-path PATH]
    ldpsc build [INPUT] -o LIB [--log-path PATH] [--cc CC] [--keep-source]
    ldpsc run [-i INPUT] [--log-path PATH] [--cc CC] -- COMMAND [ARGS...]

INPUT is a file of C prototypes, '-' (the default) reads stdin.
"""

import argparse
import os
import shlex
import sys
import tempfile
from typing import List, Optional

from . import __version__
from .build import BuildCache, read_input, write_output, STDIO
from .config import Config
from .errors import ParseError, BuildError
from .logger import logger, set_log_level, LogLevel
from .preload import run_with_preload
from .transform import transform
from .utils.cc_utils import compile_shared_library, get_shared_lib_extension


def _config_from_args(args) -> Config:
    cflags = shlex.split(args.cflags) if getattr(args, 'cflags', None) else None
    return Config.from_env(
        log_path=args.log_path,
        compiler=getattr(args, 'cc', None),
        cflags=cflags,
    )


def _generate_source(args, config: Config) -> str:
    content = read_input(args.input)
    return transform(content, config)


def _build_library(source: str, c_file: str, so_file: str, config: Config) -> str:
    BuildCache.write_if_changed(c_file, source)
    return compile_shared_library(c_file, so_file,
                                  compiler=config.compiler, cflags=config.cflags)


def command_generate(args) -> int:
    config = _config_from_args(args)
    source = _generate_source(args, config)
    write_output(source, args.output)
    return 0


def command_build(args) -> int:
    config = _config_from_args(args)
    source = _generate_source(args, config)
    so_file = os.path.abspath(args.output)

    if args.keep_source:
        c_file = os.path.splitext(so_file)[0] + '.c'
        _build_library(source, c_file, so_file, config)
    else:
        with tempfile.TemporaryDirectory(prefix='ldpsc-') as tmp_dir:
            _build_library(source, os.path.join(tmp_dir, 'interceptors.c'), so_file, config)

    logger.info("Built preload library", path=so_file)
    return 0


def command_run(args) -> int:
    command = list(args.command)
    if command and command[0] == '--':
        command = command[1:]
    if not command:
        logger.error("no command given; usage: ldpsc run [options] -- COMMAND [ARGS...]",
                     show_location=False)
        return 2

    config = _config_from_args(args)
    source = _generate_source(args, config)

    with tempfile.TemporaryDirectory(prefix='ldpsc-') as tmp_dir:
        c_file = os.path.join(tmp_dir, 'interceptors.c')
        so_file = os.path.join(tmp_dir, 'libinterceptors' + get_shared_lib_extension())
        _build_library(source, c_file, so_file, config)
        return run_with_preload(so_file, command)


def _add_common_options(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--log-path",
        help="File the interceptors append their log lines to "
             "('-' for the intercepted process's stderr, the default).",
    )


def _add_compiler_options(parser: argparse.ArgumentParser):
    parser.add_argument("--cc", help="C compiler to try first (default: cc, gcc, clang, zig).")
    parser.add_argument("--cflags", help="Extra compiler flags, shell-quoted.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldpsc",
        description="ldpsc (ld preload stub creator) creates stubs to preload shared libraries.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command_name", required=True)

    generate = sub.add_parser("generate", help="Write interceptor C source.")
    generate.add_argument(
        "input", nargs="?", default=STDIO,
        help="File with C prototypes. Use - to read from stdin (default).",
    )
    generate.add_argument("-o", "--output", default=STDIO,
                          help="Write the C source to path (default: stdout).")
    _add_common_options(generate)
    generate.set_defaults(func=command_generate)

    build = sub.add_parser("build", help="Compile interceptors into a shared library.")
    build.add_argument(
        "input", nargs="?", default=STDIO,
        help="File with C prototypes. Use - to read from stdin (default).",
    )
    build.add_argument("-o", "--output", required=True, help="Shared library path.")
    build.add_argument("--keep-source", action="store_true",
                       help="Keep the generated .c file next to the library.")
    _add_common_options(build)
    _add_compiler_options(build)
    build.set_defaults(func=command_build)

    run = sub.add_parser("run", help="Build interceptors and run a command with them preloaded.")
    run.add_argument("-i", "--input", default=STDIO,
                     help="File with C prototypes. Use - to read from stdin (default).")
    _add_common_options(run)
    _add_compiler_options(run)
    run.add_argument("command", nargs=argparse.REMAINDER, help="Command to run, after '--'.")
    run.set_defaults(func=command_run)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_log_level(LogLevel.DEBUG)

    source_name = getattr(args, 'input', STDIO)
    try:
        return args.func(args)
    except ParseError as e:
        logger.error(f"{source_name}: {e}", show_location=False)
    except BuildError as e:
        logger.error(str(e), show_location=False)
    except OSError as e:
        logger.error(f"{e.filename or source_name}: {e.strerror or e}", show_location=False)
    return 1


if __name__ == '__main__':
    sys.exit(main())
