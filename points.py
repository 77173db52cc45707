import logging
import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

import json
from argparse import ArgumentParser

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from mandelpoints import GeneratorConfig, InvalidArgument, PointCloudGenerator, RequestParams
from mandelpoints.canvas import render_image, write_image, write_zoom_gif
from mandelpoints.server import create_app, run_server
from mandelpoints.svg import write_svg

logger = logging.getLogger("points")

VALID_MODES = ("json", "svg", "image", "gif", "serve")


def select_device() -> str:
    # Use the first GPU when TensorFlow sees one; otherwise stay on the CPU.
    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        logger.debug("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        logger.debug("could not configure GPU memory growth: %s", e)
        return '/CPU:0'
    logger.debug("GPU found, using %s", gpus[0].name)
    return '/GPU:0'


@dataclass
class OutputConfig:
    modes: tuple[str, ...]
    output_dir: Path
    image_format: str

    @property
    def json_path(self) -> Path:
        return self.output_dir / "points.json"

    @property
    def svg_path(self) -> Path:
        return self.output_dir / "points.svg"

    @property
    def image_path(self) -> Path:
        return self.output_dir / f"points.{self.image_format}"

    @property
    def gif_path(self) -> Path:
        return self.output_dir / "zoom.gif"


def build_parser():
    parser = ArgumentParser(description="Compute an escape-time point cloud and write or serve it.")

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH', default=800,
                        help='largest horizontal pixel index; the scan covers 0..WIDTH inclusive')
    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT', default=800,
                        help='largest vertical pixel index; the scan covers 0..HEIGHT inclusive')
    parser.add_argument('--max-iter', type=int, dest='max_iter', metavar='MAX_ITER', default=300,
                        help='iteration budget per point')
    parser.add_argument('--scale-factor', type=int, dest='scale_factor', metavar='SCALE_FACTOR', default=1,
                        help='integer scale of the plane window; larger values zoom out, zero is rejected')

    parser.add_argument('--canvas-width', type=float, dest='canvas_width', default=800.0,
                        help='canvas width used by the pixel-to-plane mapping')
    parser.add_argument('--canvas-height', type=float, dest='canvas_height', default=800.0,
                        help='canvas height used by the pixel-to-plane mapping')
    parser.add_argument('--offset-x', type=int, dest='offset_x', default=0,
                        help='integer translation of the plane window along the real axis')
    parser.add_argument('--offset-y', type=int, dest='offset_y', default=0,
                        help='integer translation of the plane window along the imaginary axis')
    parser.add_argument('--scalar', action='store_true',
                        help='evaluate pixel by pixel in Python instead of the vectorized TensorFlow loop')

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Outputs to produce. May be repeated. Choices: json, svg, image, gif, serve.')
    parser.add_argument('--output-dir', dest='output_dir', type=str, default='.',
                        help='directory that receives points.json, points.svg, points.<format> and zoom.gif')
    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default='png',
                        help='file format for the image mode. Can be any extension supported by Pillow.')
    parser.add_argument('--radius', type=float, default=0.0,
                        help='point radius for image/gif modes (0 draws single pixels); svg uses max(radius, 1)')
    parser.add_argument('--frames', type=int, default=10,
                        help='number of frames in the gif zoom-out sequence')

    parser.add_argument('--host', type=str, default='127.0.0.1', help='address the server binds to')
    parser.add_argument('--port', type=int, default=3000, help='port the server listens on')
    parser.add_argument('--assets', type=str, default=None,
                        help='directory of static front-end files served next to the API')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    modes: list[str] = []
    for mode in opt.modes or ["json"]:
        if mode not in VALID_MODES:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(sorted(VALID_MODES))}.")
        if mode not in modes:
            modes.append(mode)

    if "serve" in modes and len(modes) > 1:
        parser.error("--mode serve cannot be combined with file outputs.")
    if "gif" in modes and opt.frames <= 0:
        parser.error("--frames must be positive for the gif mode.")
    if opt.assets is not None and "serve" not in modes:
        parser.error("--assets is only valid with --mode serve.")

    image_format = (opt.format or "png").lower().lstrip(".") or "png"
    output_dir = Path(opt.output_dir).expanduser().resolve()
    if output_dir.exists() and not output_dir.is_dir():
        parser.error("--output-dir must be a directory.")

    return OutputConfig(modes=tuple(modes), output_dir=output_dir, image_format=image_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if opt.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    logger.debug("TensorFlow version: %s", tf.__version__)

    output_config = resolve_output_config(opt, parser)

    try:
        config = GeneratorConfig(
            canvas_width=opt.canvas_width,
            canvas_height=opt.canvas_height,
            offset=(opt.offset_x, opt.offset_y),
            vectorized=not opt.scalar,
            device=None if opt.scalar else select_device(),
        )
    except InvalidArgument as exc:
        parser.error(str(exc))

    if "serve" in output_config.modes:
        app = create_app(config, assets_dir=opt.assets)
        run_server(app, host=opt.host, port=opt.port)
        return 0

    params = RequestParams(
        width=opt.width,
        height=opt.height,
        max_iter=opt.max_iter,
        scale_factor=opt.scale_factor,
    )
    try:
        params.validate()
    except InvalidArgument as exc:
        parser.error(str(exc))

    file_modes = [mode for mode in output_config.modes if mode != "gif"]
    if file_modes:
        response = PointCloudGenerator(config).respond(params)
        points = response.points

        if "json" in file_modes:
            output_config.output_dir.mkdir(parents=True, exist_ok=True)
            with open(output_config.json_path, "w", encoding="utf-8") as handle:
                json.dump(response.to_dict(), handle)
            print(f"wrote {len(points)} points to {output_config.json_path}")

        if "svg" in file_modes:
            write_svg(points, output_config.svg_path, params.width, params.height, radius=max(opt.radius, 1.0))
            print(f"wrote {output_config.svg_path}")

        if "image" in file_modes:
            image = render_image(points, params.width, params.height, radius=opt.radius)
            write_image(image, output_config.image_path, output_config.image_format)
            print(f"wrote {output_config.image_path}")

    if "gif" in output_config.modes:
        try:
            write_zoom_gif(params, output_config.gif_path, opt.frames, config, radius=opt.radius)
        except InvalidArgument as exc:
            parser.error(f"--frames {opt.frames} with --scale-factor {opt.scale_factor}: {exc}")
        print(f"wrote {opt.frames} frames to {output_config.gif_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
