"""Schema loading and analysis CLI helpers."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Tuple

from ..codec.schema import BIT, BYTE, NIBBLE, Node, Sequence
from ..exceptions import SchemaError
from ..utils.sizing import encoded_bits, field_sizes

MODULE_NAME = "bitschema_user_module"


def load_module(file_path: Path) -> ModuleType:
    """Import a Python file that defines schemas.

    Args:
        file_path: Path to the Python file

    Returns:
        The executed module
    """
    spec = importlib.util.spec_from_file_location(MODULE_NAME, file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[MODULE_NAME] = module
    spec.loader.exec_module(module)
    return module


def find_schemas(module: ModuleType) -> Dict[str, Node]:
    """Return every module-level schema node, keyed by attribute name.

    The BIT, NIBBLE and BYTE aliases are skipped when imported as-is.
    """
    return {
        name: value
        for name, value in inspect.getmembers(module)
        if isinstance(value, Node)
        and not name.startswith("_")
        and not any(value is alias for alias in (BIT, NIBBLE, BYTE))
    }


def load_schema(reference: str) -> Tuple[str, Node]:
    """Load a schema given as ``path/to/file.py:NAME``.

    Args:
        reference: File path and attribute name separated by a colon

    Returns:
        Tuple of (attribute name, schema node)

    Raises:
        ValueError: If the reference is malformed or names no schema node
    """
    file_part, sep, name = reference.rpartition(":")
    if not sep or not file_part or not name:
        raise ValueError(f"Schema must be given as FILE:NAME, got {reference!r}")

    file_path = Path(file_part)
    if not file_path.exists():
        raise ValueError(f"File not found: {file_path}")

    module = load_module(file_path)
    schema = getattr(module, name, None)
    if not isinstance(schema, Node):
        raise ValueError(f"{name!r} in {file_path} is not a schema node")
    return name, schema


def analyze_file(file_path: Path) -> None:
    """Analyze all schema nodes defined in a Python file.

    Args:
        file_path: Path to Python file containing schema definitions
    """
    schemas = find_schemas(load_module(file_path))

    if not schemas:
        print(f"No schemas found in {file_path}")
        return

    print("|" * 7, "bitschema: Declarative Binary Layouts", "|" * 7)
    print(f"{len(schemas)} schema{'s' if len(schemas) != 1 else ''} loaded.")
    print("Field sizes are in bits unless otherwise noted.")
    print()

    for name, schema in schemas.items():
        analyze_schema(name, schema)


def analyze_schema(name: str, schema: Node) -> None:
    """Print a size breakdown for a single schema.

    Args:
        name: Name the schema is bound to
        schema: Schema node to analyze
    """
    print(f"{'=' * 19} {name} ({schema.kind}) {'=' * 19}")

    try:
        total_bits = encoded_bits(schema)
    except SchemaError as e:
        print(f"Size depends on decoded data: {e}")
    else:
        total_bytes = (total_bits + 7) // 8
        padding_bits = total_bytes * 8 - total_bits
        print(f"Encoded size: {total_bytes} bytes / {total_bits} bits")
        if padding_bits > 0:
            print(f"        padding to full byte{'.' * 19}{padding_bits}")
    print()

    if isinstance(schema, Sequence):
        print(f"{'-' * 27} Fields {'-' * 27}")
        for i, (field_name, bits) in enumerate(field_sizes(schema).items(), 1):
            field_desc = f"{i}. {field_name}"
            size = f"{bits} bits" if bits is not None else "dynamic"
            dots = "." * max(1, 54 - len(field_desc) - len(size))
            print(f"        {field_desc}{dots}{size}")
        print()
