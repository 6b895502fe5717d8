from .naming import lower_first, to_camel_case, to_snake_case

__all__ = [
    'lower_first',
    'to_camel_case',
    'to_snake_case',
]
