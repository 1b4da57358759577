import argparse
import json
import logging
import sys
from typing import List, Optional

from .metadata import apply_image_config_from_metadata, apply_image_config_from_metadata_cli
from .suffix import normalize_image_model


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Gemini image model suffix → base model + imageConfig"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    normalize = sub.add_parser("normalize", help="Parse a model name and print base model + metadata")
    normalize.add_argument("model", help="Model name, e.g. gemini-3-pro-image-4k-16x9")
    normalize.add_argument("--keep-base", action="store_true", help="Keep the written base instead of forcing -preview")

    apply = sub.add_parser("apply", help="Inject the model's image config into a request payload")
    apply.add_argument("model", help="Model name carrying the suffix")
    apply.add_argument("--payload", help="Path to request JSON (default: stdin)")
    apply.add_argument("--cli-format", action="store_true", help="Target request.generationConfig.imageConfig")
    apply.add_argument("--keep-base", action="store_true", help="Keep the written base instead of forcing -preview")

    return parser


def _read_payload(path: Optional[str]) -> bytes:
    if path:
        with open(path, "rb") as fh:
            return fh.read()
    return sys.stdin.buffer.read()


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    base_model, metadata = normalize_image_model(args.model, force_preview=not args.keep_base)

    if args.command == "normalize":
        json.dump(
            {"model": args.model, "base_model": base_model, "metadata": metadata},
            fp=sys.stdout,
            indent=2,
        )
        print()
    elif args.command == "apply":
        raw = _read_payload(args.payload) or b"{}"
        inject = apply_image_config_from_metadata_cli if args.cli_format else apply_image_config_from_metadata
        result = inject(base_model, metadata, raw)
        sys.stdout.write(result.decode("utf-8"))
        print()


if __name__ == "__main__":
    main()
