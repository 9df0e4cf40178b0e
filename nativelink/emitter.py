import json
import os
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from .errors import ArtifactMissing
from .store import ArtifactStore

OUTPUT_FORMATS = ("cargo", "json")


@dataclass(frozen=True)
class BuildDirectives:
    search_path: str
    library: str
    kind: str = "static"
    override: bool = True
    links: Optional[str] = None
    rerun_if_changed: Tuple[str, ...] = ()

    def as_dict(self):
        data = asdict(self)
        data["rerun_if_changed"] = list(self.rerun_if_changed)
        return data


def emit(config, store_root, triple=None, links=None, watch=()) -> BuildDirectives:
    """
    Turns a link configuration into the directives handed to the build orchestrator.

    Args:
        config: The LinkConfiguration looked up for the active triple.
        store_root: The Artifact Store root. The search path is relative when it is.
        triple: The active TargetTriple, named in the error when the artifact is gone.
        links: Name of the native dependency whose own build step is bypassed.
        watch: Extra paths whose change should re-run the build script.

    Returns:
        BuildDirectives with the search path, library name and override flag.

    Raises:
        ArtifactMissing: If the configured artifact is not a file inside the store.
    """
    store = ArtifactStore(store_root)
    artifact_path = store.path(config.artifact)
    if not store.exists(config.artifact):
        raise ArtifactMissing(triple if triple is not None else config.artifact, artifact_path)

    return BuildDirectives(
        search_path=os.path.dirname(artifact_path),
        library=config.library,
        kind=config.kind,
        override=config.override,
        links=links,
        rerun_if_changed=tuple(watch) + (artifact_path,),
    )


def render(directives: BuildDirectives, fmt="cargo"):
    if fmt == "json":
        return json.dumps(directives.as_dict(), indent=2, sort_keys=True)
    if fmt != "cargo":
        raise ValueError(f"Unknown output format '{fmt}'. Expected one of: {', '.join(OUTPUT_FORMATS)}")

    lines = [f"cargo:rerun-if-changed={path}" for path in directives.rerun_if_changed]
    search_kind = "framework" if directives.kind == "framework" else "native"
    lines.append(f"cargo:rustc-link-search={search_kind}={directives.search_path}")
    lines.append(f"cargo:rustc-link-lib={directives.kind}={directives.library}")
    if directives.override:
        lines.append("cargo:rustc-cfg=nativelink_override")
        if directives.links:
            lines.append(f"cargo:rustc-env=NATIVELINK_OVERRIDE={directives.links}")
    return "\n".join(lines)
