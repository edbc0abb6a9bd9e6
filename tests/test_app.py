from pathlib import Path

from app import build_parser, main


def test_parser_reads_roi() -> None:
    args = build_parser().parse_args(
        ["--image", "a.png", "--model", "m.onnx", "--roi", "0.5", "0.4", "0.3", "0.6", "0.1"]
    )
    assert args.roi == [0.5, 0.4, 0.3, 0.6, 0.1]
    assert args.debug is False


def test_unreadable_image_exits_with_error(tmp_path: Path) -> None:
    assert main(["--image", str(tmp_path / "missing.png"), "--model", str(tmp_path / "m.onnx")]) == 1
