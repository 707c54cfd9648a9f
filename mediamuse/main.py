"""Main application entry point for MediaMuse."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from .audio.recorder import CaptureController
from .config import MediaMuseConfig
from .errors import MicrophonePermissionError
from .gateway.model_gateway import ModelGateway, create_client
from .models.status import AppMode, RequestStatus
from .services.image_analyzer import ImageAnalyzerController
from .services.image_editor import ImageEditorController
from .services.song_identifier import SongIdentifierController
from .ui.console import ConsoleView

logger = logging.getLogger(__name__)


COMMAND_MODES = {
    "edit": AppMode.IMAGE_EDITOR,
    "analyze": AppMode.IMAGE_ANALYZER,
    "identify": AppMode.SONG_SEARCH,
}


class App:
    """Wires configuration, the Gemini client and the three tools together."""

    def __init__(self, config: MediaMuseConfig, view: Optional[ConsoleView] = None,
                 gateway: Optional[ModelGateway] = None):
        self.config = config
        self.view = view or ConsoleView()
        self.gateway = gateway or ModelGateway(create_client(config), config)

    async def run_edit(self, image: str, prompt: str, merge: Optional[str], output: str) -> int:
        editor = ImageEditorController(self.gateway)
        editor.tracker.add_listener(self.view.on_status)
        editor.select_base(image)
        if merge:
            editor.select_merge(merge)
        editor.set_prompt(prompt)

        status = await editor.generate()
        if status is RequestStatus.SUCCESS:
            saved = editor.save_result(output)
            self.view.show_edit_result(editor.result, str(saved))
            return 0
        if status is RequestStatus.IDLE:
            self.view.show_error("An image and a non-empty prompt are required.")
        else:
            self.view.show_error(editor.tracker.error_message)
        return 1

    async def run_analyze(self, image: str) -> int:
        analyzer = ImageAnalyzerController(self.gateway)
        analyzer.tracker.add_listener(self.view.on_status)
        analyzer.select_image(image)

        status = await analyzer.analyze()
        if status is RequestStatus.SUCCESS:
            self.view.show_analysis(analyzer.result)
            return 0
        self.view.show_error(analyzer.tracker.error_message)
        return 1

    async def run_identify(self, duration: Optional[float]) -> int:
        capture = CaptureController(
            sample_rate=self.config.get('audio.sample_rate', 16000),
            chunk_size=self.config.get('audio.chunk_size', 1024),
            channels=self.config.get('audio.channels', 1),
        )
        identifier = SongIdentifierController(self.gateway, capture)
        identifier.tracker.add_listener(self.view.on_status)
        try:
            try:
                await identifier.start_recording()
            except MicrophonePermissionError as e:
                self.view.show_error(e.user_message)
                return 1

            if duration:
                await asyncio.sleep(duration)
            else:
                await asyncio.to_thread(input, "Recording... press Enter to stop ")
            self.view.show_recording(capture.capture.get_recording_stats())

            status = await identifier.stop_recording()
            if status is RequestStatus.SUCCESS:
                self.view.show_song(identifier.result)
                return 0
            self.view.show_error("Error analyzing audio. Please try again.")
            return 1
        finally:
            identifier.close()


def setup_logging(config: MediaMuseConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/mediamuse.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only warnings and above on console
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("MediaMuse starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MediaMuse - Gemini-powered creative tools",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: logging.level from config)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="MediaMuse v0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command")

    edit = subparsers.add_parser("edit", help="Edit or merge images from a prompt")
    edit.add_argument("image", help="Base image")
    edit.add_argument("--prompt", "-p", required=True, help="Describe your changes")
    edit.add_argument("--merge", "-m", help="Optional second image to combine")
    edit.add_argument("--output", "-o", default="mediamuse-edit.png", help="Where to save the result")

    analyze = subparsers.add_parser("analyze", help="Analyze an image in detail")
    analyze.add_argument("image", help="Image to analyze")

    identify = subparsers.add_parser("identify", help="Identify a song from the microphone")
    identify.add_argument(
        "--duration",
        type=float,
        help="Record for this many seconds (default: until Enter is pressed)"
    )
    return parser


def main(argv=None) -> None:
    """Main entry point for MediaMuse."""
    args = build_parser().parse_args(argv)

    view = ConsoleView()
    mode = COMMAND_MODES.get(args.command, AppMode.LANDING)

    try:
        config = MediaMuseConfig(args.config)
        setup_logging(config, args.log_level or config.get('logging.level', 'INFO'))

        if mode is AppMode.LANDING:
            view.show_landing()
            return

        app = App(config, view)
        if mode is AppMode.IMAGE_EDITOR:
            exit_code = asyncio.run(app.run_edit(args.image, args.prompt, args.merge, args.output))
        elif mode is AppMode.IMAGE_ANALYZER:
            exit_code = asyncio.run(app.run_analyze(args.image))
        else:
            exit_code = asyncio.run(app.run_identify(args.duration))
    except KeyboardInterrupt:
        print("\nGoodbye!")
        exit_code = 130
    except (FileNotFoundError, ValueError) as e:
        view.show_error(f"Error: {e}")
        logger.error(f"Application error: {e}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
