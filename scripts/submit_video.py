"""Command-line entry point for submitting one video for analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from swingsubmit.config import load_config
from swingsubmit.exceptions import SubmissionError
from swingsubmit.logging import configure_logging
from swingsubmit.submission import ProgressUpdate, build_submission_service
from swingsubmit.upload import SubmissionMetadata, VideoFile


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit a stroke video for AI analysis.")
    parser.add_argument("video", help="Path to the video file.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--stroke-type", required=True, choices=["forehand", "backhand", "serve", "volley"])
    parser.add_argument("--handedness", default="right", choices=["right", "left"])
    parser.add_argument("--experience", default="")
    parser.add_argument("--content-type", default=None, help="Override the guessed media type.")
    parser.add_argument("--session-id", default=None)
    return parser.parse_args(argv)


def print_progress(update: ProgressUpdate) -> None:
    print(
        f"[{update.phase.value}] {update.snapshot.percent}% {update.snapshot.message}",
        file=sys.stderr,
    )


async def run(args: argparse.Namespace) -> dict:
    service = build_submission_service(load_config())
    video = VideoFile.from_path(args.video, content_type=args.content_type)
    metadata = SubmissionMetadata(
        email=args.email,
        stroke_type=args.stroke_type,
        handedness=args.handedness,
        experience=args.experience,
    )
    try:
        return await service.submit(
            video,
            metadata,
            session_id=args.session_id,
            on_progress=print_progress,
        )
    finally:
        await service.recorder.drain()


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        result = asyncio.run(run(args))
    except FileNotFoundError as exc:
        print(f"submission failed: {exc}", file=sys.stderr)
        return 2
    except SubmissionError as exc:
        print(f"submission failed during {exc.phase}: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
