from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "160", "--canvas-width", "160", "--canvas-height", "160"]


@dataclass
class Expected:
    path: Path
    is_dir: bool = False


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return ["python", "points.py", *self.args]


def _example(name: str, args: list[str], *outputs: str) -> Example:
    root = EXAMPLES_ROOT / name
    return Example(
        name=name,
        args=[*BASE_ARGS, *args, "--output-dir", str(root)],
        expected=[Expected(root / output) for output in outputs],
        clean=[root],
    )


EXAMPLES: list[Example] = [
    _example("json", ["--mode", "json"], "points.json"),
    _example("svg", ["--mode", "svg", "--radius", "1"], "points.svg"),
    _example("image", ["--mode", "image"], "points.png"),
    _example("max-iter", ["--mode", "image", "--max-iter", "30"], "points.png"),
    _example("scale-factor", ["--mode", "image", "--scale-factor", "3"], "points.png"),
    _example("negative-scale", ["--mode", "image", "--scale-factor", "-1"], "points.png"),
    _example("offset", ["--mode", "image", "--offset-x", "1", "--offset-y", "-1"], "points.png"),
    _example("radius", ["--mode", "image", "--radius", "2"], "points.png"),
    _example("format", ["--mode", "image", "--format", "webp"], "points.webp"),
    _example("scalar", ["--mode", "json", "--scalar", "--max-iter", "20"], "points.json"),
    _example("gif", ["--mode", "gif", "--frames", "4"], "zoom.gif"),
    _example("all-files", ["--mode", "json", "--mode", "svg", "--mode", "image"], "points.json", "points.svg", "points.png"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    clean = example.clean or []
    _ensure_clean(clean)
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if expected.is_dir:
            if not expected.path.is_dir():
                raise RuntimeError(f"Expected directory {expected.path} was not created")
            if not any(expected.path.iterdir()):
                raise RuntimeError(f"Directory {expected.path} is empty")
        else:
            if not expected.path.is_file():
                raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        completed = subprocess.run(example.full_args(), check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
