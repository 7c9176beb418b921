"""
Capabilities shared by every packager and announcer.

A target is processed in three strictly sequential steps driven by the
dispatcher: build_context(), render(context) and deliver(outputs).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .model import ReleaseModel


@dataclass
class RenderedFile:
    """A rendered file waiting to be written."""
    path: Path
    content: str


@dataclass
class RenderedMessage:
    """A rendered announcement waiting to be sent."""
    channel: str
    subject: str
    body: str
    link: str = ""


RenderedOutput = Union[RenderedFile, RenderedMessage]


class Target:
    """
    One configured packager or announcer.

    Subclasses set kind and tool_name and implement the three pipeline
    steps. Targets hold no state between steps other than what is passed
    through the returned context and outputs.
    """

    kind = ""
    tool_name = ""

    def __init__(self, model: ReleaseModel, environ: Optional[Mapping[str, str]] = None):
        self.model = model
        self.environ = environ

    @property
    def name(self) -> str:
        return self.tool_name

    def is_enabled(self) -> bool:
        raise NotImplementedError

    def build_context(self) -> Dict[str, Any]:
        raise NotImplementedError

    def render(self, context: Mapping[str, Any]) -> List[RenderedOutput]:
        raise NotImplementedError

    def deliver(self, outputs: List[RenderedOutput], dry_run: bool = False) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"
