"""
Registry of packagers and announcers.

Targets are created in a fixed order: packagers first, one per
distribution, then announcers.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import config
from .model import ReleaseModel
from .scoop_processor import ScoopProcessor
from .sdkman_announcer import SdkmanAnnouncer
from .target import Target
from .zulip_announcer import ZulipAnnouncer

TARGET_TYPES = [
    ScoopProcessor,
    ZulipAnnouncer,
    SdkmanAnnouncer,
]


def create_targets(
    model: ReleaseModel,
    output_dir: Path,
    template_dir: Optional[Path] = None,
    client_factories: Optional[Dict[str, Callable[..., Any]]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> List[Target]:
    """
    Instantiate every registered target for a release.

    Args:
        model: Release model
        output_dir: Output root for packagers
        template_dir: Template root overriding the bundled templates
        client_factories: Network client factories by tool name
        environ: Environment used for credential lookups

    Returns:
        Targets in registry order
    """
    factories = client_factories or {}
    targets: List[Target] = []
    for target_type in TARGET_TYPES:
        if target_type.kind == config.KIND_PACKAGER:
            for distribution in model.distributions:
                targets.append(target_type(
                    model, distribution, output_dir,
                    template_dir=template_dir, environ=environ,
                ))
        else:
            targets.append(target_type(
                model,
                client_factory=factories.get(target_type.tool_name),
                environ=environ,
            ))
    return targets


def filter_targets(targets: List[Target], names: Optional[List[str]]) -> List[Target]:
    """Keep targets whose name or tool name is listed; all when names is empty."""
    if not names:
        return list(targets)
    wanted = set(names)
    return [t for t in targets if t.name in wanted or t.tool_name in wanted]
