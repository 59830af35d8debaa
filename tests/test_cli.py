"""
test_cli.py
"""
import PIL.Image
import pytest

import fractal
from fractals.raster import BLACK, WHITE
from scripts.generate_cli_examples import EXAMPLES, check_image


def test_hex_colors():
    assert fractal.hex_to_rgb01('#ff0000') == (1.0, 0.0, 0.0)
    assert fractal.hex_to_rgb01('000000') == (0.0, 0.0, 0.0)
    assert fractal.rgb01_to_hex(WHITE) == '#ffffff'
    assert fractal.rgb01_to_hex(BLACK) == '#000000'


@pytest.mark.parametrize('value', ['#fff', '#gg0000'])
def test_hex_colors_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        fractal.hex_to_rgb01(value)


def test_parser_defaults():
    parser = fractal.build_parser()

    curve = parser.parse_args(['koch-curve'])
    assert (curve.iterations, curve.width, curve.height, curve.thickness) == (5, 2048, 2048, 0)
    assert (curve.format, curve.file_name) == ('BMP', 'koch_curve')

    snowflake = parser.parse_args(['koch-snowflake'])
    assert snowflake.square_dimension == 2048
    assert snowflake.file_name == 'koch_snowflake'

    mandelbrot = parser.parse_args(['mandelbrot'])
    assert (mandelbrot.width, mandelbrot.height, mandelbrot.max_iter) == (1280, 720, 50)
    assert mandelbrot.file_name == 'Mandelbrot'


def test_koch_curve_command(tmp_path):
    path = fractal.main([
        'koch-curve', '--iterations', '1', '--width', '40', '--height', '20',
        '--start', '0', '10', '--end', '30', '10', '--color', '#ff0000',
        '--format', 'PNG', '--output-dir', str(tmp_path),
    ])

    assert path == tmp_path / 'koch_curve.png'
    with PIL.Image.open(path) as image:
        assert image.size == (40, 20)
        assert image.getpixel((0, 10)) == (255, 0, 0)
        assert image.getpixel((39, 0)) == (0, 0, 0)


def test_koch_snowflake_command(tmp_path):
    path = fractal.main([
        'koch-snowflake', '--iterations', '2', '--square-dimension', '90',
        '--file-name', 'flake', '--output-dir', str(tmp_path),
    ])
    assert path == tmp_path / 'flake.bmp'
    with PIL.Image.open(path) as image:
        assert image.size == (90, 90)


def test_mandelbrot_command(tmp_path):
    path = fractal.main([
        'mandelbrot', '--width', '48', '--height', '27', '--max-iter', '15',
        '--colormap', 'inferno', '--format', 'PNG', '--output-dir', str(tmp_path),
    ])
    assert path == tmp_path / 'Mandelbrot.png'
    with PIL.Image.open(path) as image:
        assert image.size == (48, 27)


@pytest.mark.parametrize('argv', [
    ['koch-curve', '--iterations', '0'],
    ['koch-curve', '--color', 'white'],
    ['koch-curve', '--start', '1', '1', '--end', '1', '1'],
    ['koch-snowflake', '--thickness', '-2'],
    ['mandelbrot', '--max-iter', '0'],
    ['mandelbrot', '--colormap', 'no-such-colormap'],
    [],
])
def test_invalid_arguments_exit(tmp_path, argv):
    with pytest.raises(SystemExit):
        fractal.main([*argv, '--output-dir', str(tmp_path)] if argv else argv)


@pytest.mark.parametrize('example', EXAMPLES, ids=lambda example: example.name)
def test_cli_examples_parse(example):
    opt = fractal.build_parser().parse_args(example.cli_args())
    assert opt.command == example.command
    assert opt.output_dir == str(example.output_dir)


def test_default_endpoints_stay_inside_the_image():
    start, end = fractal.default_endpoints(40, 20)
    assert start == (0.0, 10.0)
    assert end == (39.0, 10.0)


def test_koch_curve_command_default_segment(tmp_path):
    path = fractal.main([
        'koch-curve', '--iterations', '1', '--width', '40', '--height', '20',
        '--format', 'PNG', '--output-dir', str(tmp_path),
    ])
    with PIL.Image.open(path) as image:
        assert image.getpixel((0, 10)) == (255, 255, 255)
        assert image.getpixel((38, 10)) == (255, 255, 255)


@pytest.mark.parametrize('name', ['curve-color', 'snowflake-jpeg', 'mandelbrot-format'])
def test_cli_example_writes_checked_image(tmp_path, monkeypatch, name):
    monkeypatch.chdir(tmp_path)
    example = next(example for example in EXAMPLES if example.name == name)
    fractal.main(example.cli_args())
    check_image(example)
