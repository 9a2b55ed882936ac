"""
Command line entry point.

    python main.py angles packshot.png -o out/
    python main.py scene packshot.png --scene bar.jpg --prompt "warm light" -o out/
    python main.py scene packshot.png --style a.jpg --style b.jpg --mode complex -o out/
    python main.py history list
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from app.bootstrap.bootstrapper import bootstrap_generation_service, bootstrap_history
from app.entities.image import ImagePayload
from app.exceptions import StudioError
from app.repositories.history_repository.history_repository_interface import (
    HistoryRepositoryInterface,
)
from app.services.GenerationService.generation_service_interface import (
    GenerationServiceInterface,
)
from app.utils.image_loader import load_image

_logger = logging.getLogger("main")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("value must be an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bottle-studio",
        description="Composite a bottle packshot into a reference scene with Gemini.",
    )
    parser.add_argument("--env", default="development", help="Components environment")
    parser.add_argument("--env-file", default=".env", help="Settings file")
    commands = parser.add_subparsers(dest="command", required=True)

    angles = commands.add_parser("angles", help="Generate 4 new views of the bottle")
    angles.add_argument("packshot", type=Path)
    angles.add_argument("-o", "--output", type=Path, required=True)

    scene = commands.add_parser("scene", help="Generate composite scenes")
    scene.add_argument("packshot", type=Path)
    references = scene.add_mutually_exclusive_group(required=True)
    references.add_argument(
        "--scene", type=Path, help="Reference scene whose bottle gets swapped"
    )
    references.add_argument(
        "--style",
        type=Path,
        action="append",
        help="Style reference (repeatable); implies style-only mode",
    )
    scene.add_argument("--prompt", default="", help="Additional instructions")
    scene.add_argument("--mode", choices=("simple", "complex"), default="simple")
    scene.add_argument(
        "--angle",
        type=Path,
        action="append",
        help="Previously generated angle image to reuse in complex mode (repeatable)",
    )
    scene.add_argument("--count", type=_positive_int, default=None)
    scene.add_argument("-o", "--output", type=Path, required=True)

    history = commands.add_parser("history", help="Manage saved generations")
    history_commands = history.add_subparsers(dest="history_command", required=True)
    history_commands.add_parser("list")
    delete = history_commands.add_parser("delete")
    delete.add_argument("entry_id")
    history_commands.add_parser("clear")
    export = history_commands.add_parser("export")
    export.add_argument("entry_id")
    export.add_argument("-o", "--output", type=Path, required=True)

    return parser


def write_images(
    images: Sequence[ImagePayload], output_dir: Path, prefix: str
) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for index, image in enumerate(images, start=1):
        path = output_dir / f"{prefix}-{index}.png"
        path.write_bytes(image.data)
        paths.append(path)
    return paths


async def run_angles(
    args: argparse.Namespace, service: GenerationServiceInterface
) -> list[Path]:
    packshot = load_image(args.packshot)
    images = await service.generate_bottle_angles(packshot)
    return write_images(images, args.output, "angle")


async def run_scene(
    args: argparse.Namespace, service: GenerationServiceInterface
) -> list[Path]:
    packshot = load_image(args.packshot)
    style_only = bool(args.style)
    reference_paths = args.style if style_only else [args.scene]
    reference_images = [load_image(path) for path in reference_paths]
    angle_images = [load_image(path) for path in args.angle] if args.angle else None

    images = await service.generate_scene(
        mode=args.mode,
        packshot=packshot,
        reference_images=reference_images,
        user_prompt=args.prompt,
        style_only=style_only,
        angle_images=angle_images,
        output_count=args.count,
    )
    return write_images(images, args.output, "scene")


def run_history(
    args: argparse.Namespace, history: HistoryRepositoryInterface
) -> list[str]:
    """Execute a history subcommand and return the lines to print."""
    if args.history_command == "list":
        lines = []
        for entry in history.list_entries():
            created = datetime.fromtimestamp(entry["timestamp"] / 1000)
            lines.append(
                f"{entry['id']}  {created:%Y-%m-%d %H:%M}  {entry['mode']:<7}  "
                f"{len(entry['images'])} images  {entry['prompt'] or ''}".rstrip()
            )
        return lines or ["No saved generations."]

    if args.history_command == "delete":
        if not history.delete_entry(args.entry_id):
            raise StudioError(f"History entry {args.entry_id} does not exist.")
        return [f"Deleted {args.entry_id}"]

    if args.history_command == "clear":
        history.clear()
        return ["History cleared."]

    if args.history_command == "export":
        for entry in history.list_entries():
            if entry["id"] == args.entry_id:
                paths = write_images(entry["images"], args.output, entry["id"])
                return [str(path) for path in paths]
        raise StudioError(f"History entry {args.entry_id} does not exist.")

    raise StudioError(f"Unknown history command: {args.history_command}")


async def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "history":
            lines = run_history(args, bootstrap_history(args.env, args.env_file))
        else:
            service = bootstrap_generation_service(args.env, args.env_file)
            if args.command == "angles":
                paths = await run_angles(args, service)
            else:
                paths = await run_scene(args, service)
            lines = [str(path) for path in paths]
    except StudioError as e:
        _logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
