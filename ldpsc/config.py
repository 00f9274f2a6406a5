"""
Configuration for stub generation and building

Values come from the environment and can be overridden by explicit
arguments (the command line passes its options as overrides):

    LDPSC_LOG_PATH   where generated interceptors append their log lines
                     ('-' means the intercepted process's stderr)
    LDPSC_CC         C compiler used to build the preload library
    LDPSC_CFLAGS     extra compiler flags, shell-quoted
    LDPSC_LOG_LEVEL  verbosity of ldpsc itself (see ldpsc.logger)
"""

import os
import shlex
from dataclasses import dataclass, replace
from typing import Optional, Tuple

STDERR_SENTINEL = '-'


@dataclass(frozen=True)
class Config:
    """Settings shared by the generator and the build helpers"""
    log_path: str = STDERR_SENTINEL
    compiler: Optional[str] = None
    cflags: Tuple[str, ...] = ()

    @property
    def logs_to_stderr(self) -> bool:
        return self.log_path == STDERR_SENTINEL

    @classmethod
    def from_env(cls, environ=None, **overrides) -> 'Config':
        """Build a Config from environment variables plus overrides.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Field values that win over the environment; None
                values are ignored

        Returns:
            Config instance
        """
        if environ is None:
            environ = os.environ
        config = cls(
            log_path=environ.get('LDPSC_LOG_PATH') or STDERR_SENTINEL,
            compiler=environ.get('LDPSC_CC') or None,
            cflags=tuple(shlex.split(environ.get('LDPSC_CFLAGS', ''))),
        )
        changes = {k: v for k, v in overrides.items() if v is not None}
        if 'cflags' in changes:
            changes['cflags'] = tuple(changes['cflags'])
        return replace(config, **changes)
