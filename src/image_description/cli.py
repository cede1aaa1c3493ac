"""
image-description CLI - Command Line Interface

Usage:
    # Describe a local file or URL with the configured provider
    image-description describe ./photo.webp
    image-description describe https://example.com/cat.png --provider anthropic

    # Machine-readable output
    image-description describe ./photo.png --json

    # Pre-fetch the local Florence-2 model
    image-description download-model

    # Show version
    image-description --version
"""

import argparse
import asyncio
import json
import sys
from typing import Optional


def get_version() -> str:
    """Get package version"""
    try:
        from image_description import __version__
        return __version__
    except ImportError:
        return "unknown"


def apply_log_level(level: str) -> None:
    """Reconfigure console logging at the given level"""
    from image_description.utils.logger_config import configure_logger, reset_logger
    reset_logger()
    configure_logger(level=level.upper())


async def run_describe(
    ref: str,
    provider: Optional[str] = None,
    config_path: Optional[str] = None,
    as_json: bool = False,
    log_level: Optional[str] = None,
) -> int:
    """Describe one image and print the result"""
    from image_description.config import load_config
    from image_description.errors import ImageDescriptionError
    from image_description.service import ImageDescriptionService

    config = load_config(config_path)
    # --log-level takes precedence over IMAGE_DESCRIPTION_LOG_LEVEL
    if not log_level and config.log_level.upper() != "INFO":
        apply_log_level(config.log_level)
    if provider:
        config = config.model_copy(
            update={"vision": config.vision.model_copy(update={"provider": provider})}
        )

    service = ImageDescriptionService(config=config)
    try:
        result = await service.describe_image(ref)
    except ImageDescriptionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await service.cleanup()

    if result is None:
        print("Error: no vision provider could be initialized", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(result.title)
        if result.description and result.description != result.title:
            print()
            print(result.description)
    return 0


def run_download_model(repo_id: Optional[str] = None, models_dir: Optional[str] = None) -> int:
    """Download the local vision model"""
    from image_description.utils.model_downloader import download_vision_model, ensure_model_downloaded

    try:
        if repo_id:
            path = ensure_model_downloaded(repo_id=repo_id, models_dir=models_dir)
        else:
            path = download_vision_model(models_dir=models_dir)
    except Exception as e:
        print(f"Error: model download failed: {e}", file=sys.stderr)
        return 1

    print(f"Model ready at: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-description",
        description="Describe images with local or remote vision models"
    )
    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Show version"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Console log level (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    describe_parser = subparsers.add_parser(
        "describe",
        help="Describe an image file or URL"
    )
    describe_parser.add_argument(
        "ref",
        help="Image file path or URL"
    )
    describe_parser.add_argument(
        "--provider", "-p",
        help="Vision provider override (llama_local, anthropic, openai, groq, google)"
    )
    describe_parser.add_argument(
        "--config", "-c",
        dest="config_path",
        help="YAML config file (default: config.yaml)"
    )
    describe_parser.add_argument(
        "--json",
        action="store_true",
        help="Print result as JSON"
    )

    download_parser = subparsers.add_parser(
        "download-model",
        help="Download the local Florence-2 model"
    )
    download_parser.add_argument(
        "--repo-id",
        help="HuggingFace repository ID (default: microsoft/Florence-2-base-ft)"
    )
    download_parser.add_argument(
        "--models-dir",
        help="Base directory for models (default: <project>/models)"
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    parsed = parser.parse_args(args)

    if parsed.version:
        print(f"image-description {get_version()}")
        return 0

    if parsed.log_level:
        apply_log_level(parsed.log_level)

    if parsed.command == "describe":
        return asyncio.run(run_describe(
            parsed.ref,
            provider=parsed.provider,
            config_path=parsed.config_path,
            as_json=parsed.json,
            log_level=parsed.log_level,
        ))

    if parsed.command == "download-model":
        return run_download_model(repo_id=parsed.repo_id, models_dir=parsed.models_dir)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
