from .cc_utils import compile_shared_library, get_shared_lib_extension

__all__ = ['compile_shared_library', 'get_shared_lib_extension']
