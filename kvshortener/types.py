from typing import Any, TypeAlias


# Type aliases for Python dictionaries
LambdaEvent: TypeAlias = dict[str, Any]
LambdaContext: TypeAlias = Any
LambdaResponse: TypeAlias = dict[str, Any]
LambdaConfiguration: TypeAlias = dict[str, Any]
AppConfig: TypeAlias = dict[str, Any]

# Boolean QR module grid, row-major
ModuleGrid: TypeAlias = tuple[tuple[bool, ...], ...]
