from pathlib import Path
from typing import Protocol

from .meta import Header
from .model import Identifier


class FrontmatterCodec(Protocol):
    """
    Split a document into header and body and join them back.
    Decoding MUST NOT raise: malformed input is an empty header plus body.
    """

    def decode(self, text: str) -> tuple[Header, str]:
        pass

    def encode(self, header: Header, body: str) -> str:
        pass


class IdGenerator(Protocol):
    """
    Lexically sortable, time-ordered identifiers. Swapping the scheme
    (e.g. for a collision-resistant multi-process one) happens behind this.
    """

    def new_id(self) -> Identifier:
        pass


class CollisionPolicy(Protocol):
    """
    Decide the file name for an asset whose name is already taken in a
    document's asset directory by a different source file.
    """

    name: str

    def resolve(self, source: Path, taken_name: str) -> str:
        pass
