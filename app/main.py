import argparse
import json
import sys
from pathlib import Path

from app.config.settings import Settings
from app.logging.logger import Log
from app.processor.models import ProcessingRequest, new_job_timestamp
from app.processor.processor import build_processor


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="framepack",
        description="Extract one frame per second from a video into a ZIP archive.",
    )
    parser.add_argument("video", type=Path, help="Path to the video file to process")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build processor -> process one video."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    processor = build_processor(settings)
    try:
        with open(args.video, "rb") as source:
            result = processor.process(
                ProcessingRequest(
                    source=source,
                    declared_filename=args.video.name,
                    job_timestamp=new_job_timestamp(),
                )
            )
    except OSError as exc:
        Log.error(f"Could not open {args.video}: {exc}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
