import asyncio
import sys

from fukimori_engine.interface.cli.main import main


if __name__ == "__main__":
    """
    The main entrypoint for the Fukimori High engine.
    """
    try:
        print("Starting Fukimori High...")
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nApplication exited by user.")
    except Exception as e:
        print(f"\nAn unexpected error occurred: {e}", file=sys.stderr)
