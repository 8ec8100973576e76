"""Script de ejecución.

Permite ejecutar la CLI con `python -m main` desde `src/` y sirve de
entrypoint simple además del script `geoscreenshot`.
"""

from __future__ import annotations

import sys

# Consolas Windows (cp1252) no imprimen los símbolos de Rich sin esto.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
