from .cache import BuildCache
from .output_manager import read_input, write_output, STDIO

__all__ = [
    'BuildCache',
    'read_input',
    'write_output',
    'STDIO',
]
