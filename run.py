#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path

# Добавляем src/ в PYTHONPATH
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

def main():
    """Entry point: serve (по умолчанию) или decode HEX..."""
    parser = argparse.ArgumentParser(description="Teltonika Codec 8 intake service")
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("serve", help="run the TCP intake service")
    decode = commands.add_parser("decode", help="decode hex captures and print JSON")
    decode.add_argument("captures", nargs="+", metavar="HEX")
    args = parser.parse_args()

    if args.command == "decode":
        from main import decode_hex
        sys.exit(decode_hex(args.captures))

    import asyncio
    import uvloop
    from main import main as async_main

    uvloop.install()
    asyncio.run(async_main())

if __name__ == "__main__":
    main()
