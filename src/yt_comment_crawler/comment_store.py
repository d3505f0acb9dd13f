import json
from pathlib import Path
from typing import Union

from .models import Comment


INDENT = 4


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


class CommentWriter:
    """
    Streams comments to disk as they arrive.
    - compact: one JSON object per line
    - pretty:  {"comments": [...]} indented document
    """

    def __init__(self, path: Union[str, Path], pretty: bool = False):
        self.path = Path(path)
        self.pretty = pretty
        self.count = 0
        ensure_dir(self.path.parent)
        self._fh = self.path.open("w", encoding="utf-8")
        if self.pretty:
            self._fh.write("{\n" + " " * INDENT + '"comments": [\n')

    def write(self, comment: Comment) -> None:
        if self.pretty:
            if self.count:
                self._fh.write(",\n")
            body = json.dumps(comment.to_dict(), ensure_ascii=False, indent=INDENT)
            self._fh.write("\n".join(" " * (INDENT * 2) + line for line in body.splitlines()))
        else:
            self._fh.write(json.dumps(comment.to_dict(), ensure_ascii=False) + "\n")
        self._fh.flush()
        self.count += 1

    def close(self) -> None:
        if self._fh.closed:
            return
        if self.pretty:
            self._fh.write(("\n" if self.count else "") + " " * INDENT + "]\n}\n")
        self._fh.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
