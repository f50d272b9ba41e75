"""
python -m robolang FILE... – разбирает файлы программ и печатает дерево.

С ``--run`` программа выполняется на LoggingRobot; ``loop`` без конца
останавливается по Ctrl+C.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVELS, settings
from .errors import ParseError, RobolangError
from .parser import parse_file
from .robot import LoggingRobot
from .runtime import execute


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="robolang", description="Robot program parser")
    parser.add_argument("files", nargs="+", type=Path, help="Файлы программ")
    parser.add_argument(
        "--run",
        action="store_true",
        help="Выполнить программу на роботе-заглушке",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        type=str.upper,
        choices=LOG_LEVELS,
        help=f"Уровень логирования (по умолчанию {settings.log_level})",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    status = 0
    for path in args.files:
        if not path.exists():
            print(f"Can't find file '{path}'")
            status = 1
            continue

        print(f"Parsing '{path}'")
        try:
            program = parse_file(path)
        except ParseError as e:
            print("Parser error:")
            print(e)
            status = 1
            continue
        except (OSError, UnicodeDecodeError) as e:
            print(f"Can't read file '{path}': {e}")
            status = 1
            continue
        print("Parsing completed")
        print("================\nProgram:")
        print(program)
        print("=================")

        if args.run:
            robot = LoggingRobot(settings.sensor_default)
            try:
                ctx = execute(program, robot)
            except KeyboardInterrupt:
                print("Interrupted")
                status = 130
                break
            except RobolangError as e:
                print(f"Runtime error: {e}")
                status = 1
                continue
            print(f"Robot calls: {robot.call_count}; variables: {ctx.variables.as_dict()}")

    print("Done")
    return status


if __name__ == "__main__":
    sys.exit(main())
