"""Entry point: ``python -m starsniper`` or the ``starsniper`` console script.

Exit codes: 0 on normal exit or Ctrl-C, 1 on a missing dependency or an
unhandled failure.
"""
import asyncio
import importlib.util
import sys
from typing import Final

# import name -> distribution name on the package index
RUNTIME_DEPENDENCIES: Final = {
    "loguru": "loguru",
    "prompt_toolkit": "prompt-toolkit",
    "questionary": "questionary",
    "telethon": "telethon",
    "pyfiglet": "pyfiglet",
}


def missing_dependencies() -> list[tuple[str, str]]:
    return [
        (module, dist)
        for module, dist in RUNTIME_DEPENDENCIES.items()
        if importlib.util.find_spec(module) is None
    ]


def main() -> int:
    if missing := missing_dependencies():
        for module, dist in missing:
            print(
                f"[App] Missing dependency: {module}. Please install it using pip install {dist}",
                file=sys.stderr,
            )

        return 1

    from loguru import logger

    from starsniper.cli import SniperApp
    from starsniper.engine.theme import appline

    try:
        app = SniperApp()
        asyncio.run(app.runall())
    except KeyboardInterrupt:
        logger.warning("Interrupted by operator")
        return 0
    except Exception as e:
        logger.exception("Critical error: {}", e)
        print(appline(f"A critical unexpected error occurred: {e}"), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
