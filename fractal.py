import os
import sys

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from argparse import ArgumentParser

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from fractals import (
    BLACK,
    WHITE,
    KochCurveConfig,
    KochSnowflakeConfig,
    MandelbrotConfig,
    gen_mandelbrot,
    get_colormap,
    koch_curve,
    koch_snowflake,
    output_path,
)


def select_device():
    """Use the first visible GPU when there is one, the CPU otherwise."""

    gpus = tf.config.list_physical_devices('GPU')
    if gpus:
        try:
            for gpu in gpus:
                tf.config.experimental.set_memory_growth(gpu, True)
            log("GPU found, using %s" % gpus[0].name)
            return '/GPU:0'
        except RuntimeError as e:
            log(e)
            return '/CPU:0'
    log("No GPU found, using CPU")
    return '/CPU:0'


def hex_to_rgb01(hex_color):
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('colors must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('colors must contain only hexadecimal digits.') from exc


def rgb01_to_hex(color):
    return '#' + ''.join('%02x' % int(round(channel * 255)) for channel in color)


def _add_output_arguments(parser, file_name):
    parser.add_argument('--format', type=str,
                        dest='format', help='file format of the image, appended lower-cased as the extension (BMP, PNG, JPEG, PDF, ...).',
                        metavar='FORMAT', default='BMP')

    parser.add_argument('--file-name', type=str,
                        dest='file_name', help='name of the output image, without extension',
                        metavar='FILE_NAME', default=file_name)

    parser.add_argument('--output-dir', type=str,
                        dest='output_dir', help='directory in which the image is written',
                        metavar='OUTPUT_DIR', default='images')


def _add_stroke_arguments(parser):
    parser.add_argument('--iterations', type=int,
                        dest='iterations', help='number of Koch subdivision passes (at least 1)',
                        metavar='ITERATIONS', default=5)

    parser.add_argument('--thickness', type=int,
                        dest='thickness', help='extra pixels painted around every point; 1 draws 3x3 squares',
                        metavar='THICKNESS', default=0)

    parser.add_argument('--color', type=str, default=rgb01_to_hex(WHITE),
                        help='Hex color of the curve.')

    parser.add_argument('--background', type=str, default=rgb01_to_hex(BLACK),
                        help='Hex color of the image background.')


def build_parser():
    parser = ArgumentParser(description='Render Koch curves, Koch snowflakes and the Mandelbrot set to image files.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    curve = subparsers.add_parser('koch-curve', help='Koch curve grown from a single segment')
    _add_stroke_arguments(curve)
    curve.add_argument('--width', type=int,
                       dest='width', help='width of the image in pixels',
                       metavar='WIDTH', default=2048)
    curve.add_argument('--height', type=int,
                       dest='height', help='height of the image in pixels',
                       metavar='HEIGHT', default=2048)
    curve.add_argument('--start', type=float, nargs=2, metavar=('X', 'Y'), default=None,
                       help='first vertex of the starting segment. Default: left edge, vertically centered.')
    curve.add_argument('--end', type=float, nargs=2, metavar=('X', 'Y'), default=None,
                       help='last vertex of the starting segment. Default: right edge, vertically centered.')
    _add_output_arguments(curve, 'koch_curve')

    snowflake = subparsers.add_parser('koch-snowflake', help='Koch snowflake centered in a square image')
    _add_stroke_arguments(snowflake)
    snowflake.add_argument('--square-dimension', type=int,
                           dest='square_dimension', help='width and height of the square image in pixels',
                           metavar='SQUARE_DIMENSION', default=2048)
    _add_output_arguments(snowflake, 'koch_snowflake')

    mandelbrot = subparsers.add_parser('mandelbrot', help='escape-time image of the Mandelbrot set')
    mandelbrot.add_argument('--width', type=int,
                            dest='width', help='width of the image in pixels',
                            metavar='WIDTH', default=1280)
    mandelbrot.add_argument('--height', type=int,
                            dest='height', help='height of the image in pixels',
                            metavar='HEIGHT', default=720)
    mandelbrot.add_argument('--max-iter', type=int,
                            dest='max_iter', help='maximum number of iterations before a point counts as inside the set',
                            metavar='MAX_ITER', default=50)
    mandelbrot.add_argument('--colormap', type=str,
                            dest='colormap', help='matplotlib colormap used as color scheme (e.g. "Blues_r", "inferno")',
                            metavar='COLORMAP', default='Blues_r')
    _add_output_arguments(mandelbrot, 'Mandelbrot')

    return parser


def default_endpoints(width, height):
    """Horizontal segment across the image, first to last column, vertically centered."""

    return (0.0, height / 2), (float(width - 1), height / 2)


def _stroke_colors(opt, parser):
    try:
        return hex_to_rgb01(opt.color), hex_to_rgb01(opt.background)
    except ValueError as exc:
        parser.error(str(exc))


def run_koch_curve(opt, parser):
    color, background = _stroke_colors(opt, parser)
    try:
        config = KochCurveConfig(
            iterations=opt.iterations,
            width=opt.width,
            height=opt.height,
            thickness=opt.thickness,
            color=color,
            background=background,
            format=opt.format,
            file_name=opt.file_name,
            output_dir=opt.output_dir,
        )
    except ValueError as exc:
        parser.error(str(exc))

    default_start, default_end = default_endpoints(opt.width, opt.height)
    start = opt.start if opt.start is not None else default_start
    end = opt.end if opt.end is not None else default_end
    if tuple(start) == tuple(end):
        parser.error('--start and --end must be different points.')

    vertices = koch_curve([start, end], config=config)
    log("Generated %d vertices" % len(vertices))
    return output_path(config.output_dir, config.file_name, config.format)


def run_koch_snowflake(opt, parser):
    color, background = _stroke_colors(opt, parser)
    try:
        config = KochSnowflakeConfig(
            iterations=opt.iterations,
            square_dimension=opt.square_dimension,
            thickness=opt.thickness,
            color=color,
            background=background,
            format=opt.format,
            file_name=opt.file_name,
            output_dir=opt.output_dir,
        )
    except ValueError as exc:
        parser.error(str(exc))

    vertices = koch_snowflake(config=config)
    log("Generated %d vertices" % len(vertices))
    return output_path(config.output_dir, config.file_name, config.format)


def run_mandelbrot(opt, parser):
    try:
        get_colormap(opt.colormap)
    except KeyError:
        parser.error("Unknown colormap '%s'." % opt.colormap)

    try:
        config = MandelbrotConfig(
            width=opt.width,
            height=opt.height,
            max_iter=opt.max_iter,
            color_scheme=opt.colormap,
            format=opt.format,
            file_name=opt.file_name,
            output_dir=opt.output_dir,
            device=select_device(),
        )
    except ValueError as exc:
        parser.error(str(exc))

    result = gen_mandelbrot(config=config)
    return result.path


COMMANDS = {
    'koch-curve': run_koch_curve,
    'koch-snowflake': run_koch_snowflake,
    'mandelbrot': run_mandelbrot,
}


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    log("TensorFlow version: %s" % tf.__version__)

    path = COMMANDS[opt.command](opt, parser)
    log("Wrote %s" % path)
    return path


if __name__ == '__main__':
    main()
