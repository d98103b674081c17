import stat
import sys
from pathlib import Path

import pytest

if sys.platform == "win32":
    collect_ignore_glob = ["test_*.py"]


class FakeToolchain:
    """Writes small shell scripts that stand in for TeX executables."""

    def __init__(self, root: Path) -> None:
        self.bin_dir = root / "bin"
        self.bin_dir.mkdir()
        self.call_log = root / "calls.log"

    def tool(
        self,
        name: str,
        *,
        exit_code: int = 0,
        message: str = "",
        output_ext: str | None = None,
        body: str = "",
    ) -> str:
        lines = [
            "#!/bin/sh",
            "for last; do :; done",
            f'echo "{name} $*" >> "{self.call_log}"',
        ]
        if message:
            lines.append(f"printf '%s\\n' \"{message}\"")
            lines.append(f"printf '%s\\n' \"{message} (stderr)\" 1>&2")
        if output_ext:
            lines.append(f"printf '%%PDF-1.4 %s\\n' \"$last\" > \"$last.{output_ext}\"")
        if body:
            lines.append(body)
        lines.append(f"exit {exit_code}")

        path = self.bin_dir / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    def calls(self) -> list[str]:
        if not self.call_log.exists():
            return []
        return self.call_log.read_text(encoding="utf-8").splitlines()

    def called_names(self) -> list[str]:
        return [line.split(" ", 1)[0] for line in self.calls()]


@pytest.fixture
def toolchain(tmp_path: Path) -> FakeToolchain:
    return FakeToolchain(tmp_path)
