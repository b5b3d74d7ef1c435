import shutil
from pathlib import Path
from ..core.meta import Header
from ..core.model import Document
from ..core.ports import FrontmatterCodec


class DocumentStore:
    """
    Directory-per-document collection: <root>/<dirname>/<index_name>,
    with any assets living next to the index file.
    """

    def __init__(self, root: Path, codec: FrontmatterCodec, index_name: str = "index.md"):
        self.root = root
        self.codec = codec
        self.index_name = index_name

    def _path(self, dirname: str) -> Path:
        return self.root / dirname / self.index_name

    def entries(self) -> list[Path]:
        if not self.root.exists():
            return []
        return sorted(self.root.iterdir(), key=lambda p: p.name)

    def exists(self, dirname: str) -> bool:
        return (self.root / dirname).exists()

    def has_index(self, dirname: str) -> bool:
        return self._path(dirname).is_file()

    def read(self, dirname: str) -> Document | None:
        p = self._path(dirname)
        if not p.is_file():
            return None
        return read_document(p, self.codec)

    def write(self, dirname: str, document: Document) -> Path:
        p = self._path(dirname)
        p.parent.mkdir(parents=True, exist_ok=True)
        write_document(p, document, self.codec)
        return p

    def copy_dir(self, src_dirname: str, dst_dirname: str) -> None:
        shutil.copytree(self.root / src_dirname, self.root / dst_dirname)

    def remove(self, dirname: str) -> None:
        d = self.root / dirname
        if d.exists():
            shutil.rmtree(d)


def read_document(path: Path, codec: FrontmatterCodec) -> Document:
    header, body = codec.decode(path.read_text(encoding="utf-8"))
    return Document(header=Header(header), body=body)


def write_document(path: Path, document: Document, codec: FrontmatterCodec) -> None:
    write_text_atomic(path, codec.encode(document.header, document.body))


def write_text_atomic(path: Path, contents: str) -> None:
    # Atomic write via temp file; line endings are written as given
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_bytes(contents.encode("utf-8"))
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
