"""Entry point: python -m swagger_localdb generate <spec>"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
