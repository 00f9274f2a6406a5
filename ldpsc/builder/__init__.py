from .interceptor_builder import InterceptorBuilder, build_interceptor

__all__ = ['InterceptorBuilder', 'build_interceptor']
