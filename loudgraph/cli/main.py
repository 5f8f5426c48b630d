"""loudgraph CLI - loudness and PSR charts for media files."""
from __future__ import annotations
import argparse
import json
import sys
import tempfile
from pathlib import Path

from loudgraph.version import __version__
from loudgraph.analysis.windowing import WINDOW_COUNT
from loudgraph.io.ffmpeg import (
    ebur128_command,
    probe_media,
    read_framelog,
    run_ebur128,
)
from loudgraph.parsing.framelog import PEAK_LABEL, SAMPLE_PEAK_LABEL
from loudgraph.pipeline import PSRAnalysis, analyze_lines, last_frame_time, write_dataset
from loudgraph.render.gnuplot import DEFAULT_SIZE, render_chart
from loudgraph.reporting.psr_report import build_psr_report
from loudgraph.reporting.table import load_table, write_table
from loudgraph.types import MediaInfo


EXIT_OK = 0
EXIT_BAD_ARGS = 2
EXIT_ANALYZER_ERROR = 3
EXIT_RENDER_ERROR = 4
EXIT_INTERNAL_ERROR = 5

_PEAK_LABELS = {"true": PEAK_LABEL, "sample": SAMPLE_PEAK_LABEL}


def _parse_size(value: str) -> tuple[int, int]:
    """argparse type for WIDTHxHEIGHT."""
    try:
        w, h = value.lower().split("x", 1)
        size = (int(w), int(h))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}") from None
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {value!r}")
    return size


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {n}")
    return n


def _default_output(media_path: str, suffix: str) -> Path:
    p = Path(media_path)
    return p.with_name(p.stem + suffix)


def _load_analysis(args) -> tuple[MediaInfo, PSRAnalysis]:
    """Run (or read) the analyzer and compute the PSR series."""
    peak_label = _PEAK_LABELS[args.peak]
    if args.from_log:
        lines = read_framelog(args.from_log)
        duration = args.duration
        if duration is None:
            duration = last_frame_time(lines, peak_label)
        title = args.title or Path(args.media_path).stem
        media = MediaInfo(path=args.media_path, duration=float(duration), title=title)
    else:
        media = probe_media(args.media_path)
        if args.duration is not None:
            media = MediaInfo(path=media.path, duration=float(args.duration), title=media.title)
        if args.title:
            media = MediaInfo(path=media.path, duration=media.duration, title=args.title)
        if args.verbose:
            print("Running: " + " ".join(ebur128_command(media.path, args.peak)), file=sys.stderr)
        lines = run_ebur128(media.path, args.peak)

    analysis = analyze_lines(
        lines,
        media.duration,
        window_count=args.windows,
        peak_label=peak_label
    )
    if args.verbose:
        print(
            f"Frames: {len(analysis.records)}, window: {analysis.sizing.window_frames} frames, "
            f"PSR windows: {analysis.closed_windows}",
            file=sys.stderr
        )
    return media, analysis


def _write_report(path: str, media: MediaInfo, analysis: PSRAnalysis, data_path: str) -> None:
    report = build_psr_report(
        engine={"name": "loudgraph", "version": __version__},
        input_meta={"path": media.path, "title": media.title, "duration_s": media.duration},
        sizing=analysis.sizing,
        summary=analysis.summary,
        table=load_table(data_path),
    )
    Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Report written to: {path}", file=sys.stderr)


def cmd_table(args) -> int:
    """Handle table command."""
    try:
        media, analysis = _load_analysis(args)
        if args.out:
            n = write_dataset(analysis, args.out)
            print(f"Dataset written to: {args.out} ({n} rows)", file=sys.stderr)
            if args.report:
                _write_report(args.report, media, analysis, args.out)
        else:
            write_table(analysis.records, sys.stdout)
            if args.report:
                with tempfile.TemporaryDirectory(prefix="loudgraph-") as tmp:
                    data_path = str(Path(tmp) / "loudness.dat")
                    write_dataset(analysis, data_path)
                    _write_report(args.report, media, analysis, data_path)
        return EXIT_OK

    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return EXIT_ANALYZER_ERROR
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ANALYZER_ERROR
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR


def cmd_graph(args) -> int:
    """Handle graph command."""
    try:
        media, analysis = _load_analysis(args)
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return EXIT_ANALYZER_ERROR
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ANALYZER_ERROR
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR

    out_path = args.out or str(_default_output(args.media_path, ".loudness.png"))
    try:
        with tempfile.TemporaryDirectory(prefix="loudgraph-") as tmp:
            data_path = args.data_out or str(Path(tmp) / "loudness.dat")
            write_dataset(analysis, data_path)
            if args.data_out:
                print(f"Dataset written to: {data_path}", file=sys.stderr)
            if args.report:
                _write_report(args.report, media, analysis, data_path)
            render_chart(
                data_path,
                out_path,
                title=media.title,
                sizing=analysis.sizing,
                summary=analysis.summary,
                size=args.size,
                script_path=str(Path(tmp) / "loudness.gp")
            )
        print(f"Chart written to: {out_path}", file=sys.stderr)
        return EXIT_OK

    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RENDER_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RENDER_ERROR
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR


def _add_analysis_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "media_path",
        help="Path to audio or video file"
    )
    p.add_argument(
        "--from-log",
        help="Read a captured ebur128 log instead of running ffmpeg"
    )
    p.add_argument(
        "--duration",
        type=float,
        help="Override media duration in seconds (default: ffprobe, or last frame time with --from-log)"
    )
    p.add_argument(
        "--windows", "-w",
        type=_positive_int,
        default=WINDOW_COUNT,
        help=f"Number of PSR windows over the program (default: {WINDOW_COUNT})"
    )
    p.add_argument(
        "--peak",
        choices=sorted(_PEAK_LABELS),
        default="true",
        help="Peak measurement used for PSR (default: true)"
    )
    p.add_argument(
        "--title",
        help="Chart title (default: media title/artist tags, else file name)"
    )
    p.add_argument(
        "--report",
        help="Output path for PSR report JSON"
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print analyzer commands and frame counts to stderr"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loudgraph",
        description="loudgraph - loudness and PSR charts for media files"
    )
    parser.add_argument(
        "--version", action="version",
        version=f"loudgraph {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # graph command
    graph_parser = subparsers.add_parser(
        "graph",
        help="Analyze a media file and render a loudness/PSR chart"
    )
    _add_analysis_args(graph_parser)
    graph_parser.add_argument(
        "--out", "-o",
        help="Output PNG path (default: <media>.loudness.png)"
    )
    graph_parser.add_argument(
        "--data-out",
        help="Keep the dataset at this path instead of a temporary file"
    )
    graph_parser.add_argument(
        "--size",
        type=_parse_size,
        default=DEFAULT_SIZE,
        help=f"Chart size in pixels (default: {DEFAULT_SIZE[0]}x{DEFAULT_SIZE[1]})"
    )
    graph_parser.set_defaults(func=cmd_graph)

    # table command
    table_parser = subparsers.add_parser(
        "table",
        help="Analyze a media file and write the loudness/PSR dataset"
    )
    _add_analysis_args(table_parser)
    table_parser.add_argument(
        "--out", "-o",
        help="Output dataset path (default: stdout)"
    )
    table_parser.set_defaults(func=cmd_table)
    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if hasattr(args, "func"):
        sys.exit(args.func(args))
    else:
        parser.print_help()
        sys.exit(EXIT_BAD_ARGS)


if __name__ == "__main__":
    main()
