"""Entry point: python -m sdkgen

Reads the OpenAPI document and writes the SDK stubs, index and types.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
