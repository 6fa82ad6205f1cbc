"""
pixbatch - command-line entry point.

Collects image files from the given paths, runs them through the pipeline
and writes the results to a directory or a ZIP archive.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from pixbatch.common.base import CropRegion
from pixbatch.common.constants import FormatConstants
from pixbatch.common.enums import OutputFormat, WatermarkPosition
from pixbatch.config import Settings, configure_logging, get_settings
from pixbatch.exceptions import PixbatchException
from pixbatch.schemas import InputFile
from pixbatch.services import PipelineService, build_zip_archive, write_to_directory

logger = logging.getLogger(__name__)

# argparse dest -> ProcessOptions field
OPTION_FLAGS = {
    "width": "target_width",
    "height": "target_height",
    "auto_width": "auto_width",
    "auto_height": "auto_height",
    "format": "output_format",
    "quality": "quality",
    "border_color": "border_color",
    "border": "border_thickness",
    "watermark": "watermark_text",
    "watermark_size": "watermark_size",
    "watermark_opacity": "watermark_opacity",
    "watermark_position": "watermark_position",
    "pattern": "rename_pattern",
    "start": "start_number",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixbatch", description="Batch crop, resize, decorate and rename images."
    )
    parser.add_argument("inputs", nargs="+", help="Image files or directories")

    output = parser.add_mutually_exclusive_group(required=True)
    output.add_argument("-o", "--output-dir", help="Directory to write results into")
    output.add_argument(
        "--zip", nargs="?", const="", help="Write results into a ZIP archive (default name from settings)"
    )

    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--crops", help="JSON file mapping file keys to crop regions")
    parser.add_argument("--overwrite", action="store_true", default=None)

    size = parser.add_argument_group("size")
    size.add_argument("--width", type=float)
    size.add_argument("--height", type=float)
    size.add_argument("--ratio", help="Crop aspect ratio, e.g. 16:9")
    size.add_argument("--auto-width", action="store_true", default=None)
    size.add_argument("--auto-height", action="store_true", default=None)
    size.add_argument("--fast", action="store_true", help="Bilinear instead of Lanczos/area")
    size.add_argument("--no-focal", action="store_true", help="Center crops instead of saliency")
    size.add_argument("--skip-resize", action="store_true", help="Keep source dimensions")

    encode = parser.add_argument_group("encoding")
    encode.add_argument("--format", choices=[f.value for f in OutputFormat])
    encode.add_argument("--quality", type=float)

    decorate = parser.add_argument_group("decoration")
    decorate.add_argument("--border-color")
    decorate.add_argument("--border", type=int, help="Border thickness in pixels")
    decorate.add_argument("--watermark", help="Watermark text")
    decorate.add_argument("--watermark-size", type=float)
    decorate.add_argument("--watermark-opacity", type=float)
    decorate.add_argument("--watermark-position", choices=[p.value for p in WatermarkPosition])

    naming = parser.add_argument_group("naming")
    naming.add_argument("--pattern", help="Rename pattern (ORIGINAL-NAME, {width}, {height}, xxx)")
    naming.add_argument("--start", type=int, help="Sequence start number")

    return parser


def option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Options explicitly given on the command line."""
    overrides = {
        field: getattr(args, dest)
        for dest, field in OPTION_FLAGS.items()
        if getattr(args, dest) is not None
    }

    if args.ratio:
        ratio_x, _, ratio_y = args.ratio.partition(":")
        overrides["ratio_x"] = float(ratio_x)
        overrides["ratio_y"] = float(ratio_y or 1)
    if args.fast:
        overrides["use_high_quality"] = False
    if args.no_focal:
        overrides["auto_focal"] = False
    if args.skip_resize:
        overrides["skip_resize"] = True

    return overrides


def collect_inputs(paths: List[str]) -> List[InputFile]:
    """
    Read input files, expanding directories (non-recursive, sorted).

    Raises:
        FileNotFoundError: If a path does not exist
    """
    files: List[InputFile] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.iterdir()):
                if child.is_file() and child.suffix.lower() in FormatConstants.EXTENSION_TO_MIME:
                    files.append(InputFile.from_path(child))
        else:
            files.append(InputFile.from_path(path))
    return files


def load_crops(path: Optional[str]) -> Dict[str, CropRegion]:
    """Read a manual crop map from JSON."""
    if not path:
        return {}
    with open(path, "r") as f:
        data = json.load(f)
    return {key: CropRegion.from_dict(region) for key, region in data.items()}


def run(args: argparse.Namespace, settings: Settings) -> int:
    options = settings.default_options(**option_overrides(args))
    files = collect_inputs(args.inputs)
    results = PipelineService().process(files, options, load_crops(args.crops))

    if args.zip is not None:
        archive = args.zip or settings.export.archive_name
        Path(archive).write_bytes(build_zip_archive(results))
        print(f"Wrote {len(results)} images to {archive}")
    else:
        overwrite = settings.export.overwrite if args.overwrite is None else args.overwrite
        write_to_directory(results, args.output_dir, overwrite=overwrite)
        print(f"Wrote {len(results)} images to {args.output_dir}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings(config_file=args.config) if args.config else get_settings()
    configure_logging(settings)

    try:
        return run(args, settings)
    except PixbatchException as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except (ValidationError, FileNotFoundError, FileExistsError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
