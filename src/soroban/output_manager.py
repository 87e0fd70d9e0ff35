# output_manager.py

import re
from pathlib import Path

from soroban.fmt import strip_ansi
from soroban.workspace import workspace_dir

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._=-]+")


def resolve_output_path(target: str, root: Path | None = None) -> Path:
    """'~/x.txt' and absolute paths are taken as given; anything else lives under the workspace."""
    if not target:
        raise ValueError("Output path is empty")
    p = Path(target).expanduser()
    if not p.is_absolute():
        p = (root or workspace_dir()) / p
    return p.resolve()


def _free_name(path: Path) -> Path:
    """'w.txt' if unused, else 'w_2.txt', 'w_3.txt', ..."""
    n = 1
    candidate = path
    while candidate.exists():
        n += 1
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
    return candidate


def worksheet_filename(stem: str, ext: str = ".txt") -> str:
    """Filesystem-safe file name for one worksheet, e.g. 'friendsOf10_seed=7.txt'."""
    safe = _UNSAFE_RE.sub("_", str(stem)).strip("._-=") or "worksheet"
    return safe + ext


def _is_directory_target(target: str) -> bool:
    return target in (".", "./") or target.endswith(("/", "\\"))


class OutputManager:
    """
    Sends worksheet text to the screen, a file, or both.

    OUTPUT_FILE / --output:
        None or ""        screen only
        "." or "dir/"     one new file per worksheet in that folder, named
                          after `stem` ('friendsOf10_seed=7.txt', then '_2', ...)
        "drills.txt"      every worksheet appended to this file, separated
                          by an empty line

    Files never contain colour codes. Relative paths are taken from the workspace.

        om = OutputManager("worksheets/", stem="friendsOf10")
        om.write("1. 3 + 8 = 11")
        om.close()          # the per-worksheet file is written here
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, stem: str | None = None):
        self.quiet = quiet
        self.target = output_file or ""
        self.last_error: str | None = None
        self._lines: list[str] = []
        self._folder_file: Path | None = None
        self._append_file: Path | None = None

        if not self.target:
            return
        if _is_directory_target(self.target):
            if stem is None:
                raise ValueError("Writing to a folder needs a worksheet name.")
            folder = resolve_output_path(self.target)
            folder.mkdir(parents=True, exist_ok=True)
            self._folder_file = _free_name(folder / worksheet_filename(stem))
        else:
            self._append_file = resolve_output_path(self.target)
            self._append_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path | None:
        return self._folder_file or self._append_file

    def _save(self, path: Path, text: str, mode: str) -> None:
        try:
            with path.open(mode, encoding="utf-8") as fh:
                fh.write(text)
        except OSError as e:
            self.last_error = f"{type(e).__name__}: {e}"

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Print a line and record it for the file."""
        text = sep.join(str(a) for a in args) + end
        self._lines.append(text)
        if not self.quiet:
            print(text, end="")
        if self._append_file is not None:
            self._save(self._append_file, strip_ansi(text), "a")

    def getvalue(self) -> str:
        return "".join(self._lines)

    def close(self) -> None:
        if not self._lines:
            return
        if self._folder_file is not None:
            self._save(self._folder_file, strip_ansi(self.getvalue()), "w")
        elif self._append_file is not None:
            self._save(self._append_file, "\n", "a")
        self._lines = []
