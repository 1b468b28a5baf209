"""
tv video commands

Video export operations (export, plan).
"""

from tv_assembler import export_video, plan_export
from tv_common import error_response
from tv_config import DEFAULT_CONFIG_FILE, MODES, load_config


def register(subparsers):
    """Register video commands."""
    video_parser = subparsers.add_parser('video', help='Tutorial video export')
    video_sub = video_parser.add_subparsers(dest='video_command')

    # tv video export
    export_parser = video_sub.add_parser('export', help='Render the tutorial into an MP4 video')
    export_parser.add_argument('--config', '-c', default=DEFAULT_CONFIG_FILE, help='Config JSON file')
    export_parser.add_argument('--output', '-o', help='Output video path (overrides video.output)')
    export_parser.add_argument('--mode', choices=MODES, help='Assembly mode (overrides video.mode)')
    export_parser.add_argument('--audio', help='Background audio file (overrides video.audio)')
    export_parser.add_argument('--no-progress', action='store_true', help='Do not print frame progress')
    export_parser.set_defaults(func=cmd_export)

    # tv video plan
    plan_parser = video_sub.add_parser('plan', help='Show slides, frame count and duration without rendering')
    plan_parser.add_argument('--config', '-c', default=DEFAULT_CONFIG_FILE, help='Config JSON file')
    plan_parser.add_argument('--mode', choices=MODES, help='Assembly mode (overrides video.mode)')
    plan_parser.set_defaults(func=cmd_plan)


def _overrides(args) -> dict:
    return {
        'video.output': getattr(args, 'output', None),
        'video.mode': getattr(args, 'mode', None),
        'video.audio': getattr(args, 'audio', None),
    }


def cmd_export(args) -> dict:
    """Handle tv video export command."""
    try:
        config = load_config(args.config, _overrides(args))
        if args.no_progress:
            return export_video(config, progress=None)
        return export_video(config)
    except Exception as e:
        return error_response(e, "video export")


def cmd_plan(args) -> dict:
    """Handle tv video plan command."""
    try:
        return plan_export(load_config(args.config, _overrides(args)))
    except Exception as e:
        return error_response(e, "video plan")
