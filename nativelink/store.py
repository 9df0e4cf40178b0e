import os
import posixpath
from dataclasses import dataclass

from .triple import TargetTriple

# Artifact Store layout: <root>/<family>/<arch>/<library file>
OS_FAMILIES = {
    "windows": "windows",
    "linux": "linux",
    "darwin": "macos",
    "macos": "macos",
    "ios": "ios",
    "tvos": "tvos",
    "watchos": "watchos",
    "visionos": "visionos",
    "android": "android",
    "freebsd": "bsd",
    "netbsd": "bsd",
    "openbsd": "bsd",
    "dragonfly": "bsd",
    "wasi": "wasm",
    "emscripten": "wasm",
}

LIBRARY_SUFFIXES = (".dll.a", ".lib", ".a", ".so", ".dylib", ".dll", ".framework")


@dataclass(frozen=True)
class ArtifactEntry:
    triple: TargetTriple
    path: str
    library: str


def platform_family(triple: TargetTriple) -> str:
    return OS_FAMILIES.get(triple.os, triple.os)


def library_filename(triple: TargetTriple, library: str, kind: str = "static") -> str:
    """File name the toolchain for triple expects for a library of the given kind."""
    if kind == "framework":
        return f"{library}.framework"
    if triple.env == "msvc":
        # MSVC links against .lib for static libraries and DLL import libraries alike.
        return f"{library}.lib"
    if kind == "dylib":
        if triple.os == "windows":
            return f"lib{library}.dll.a"
        if triple.os in ("darwin", "macos", "ios", "tvos", "watchos", "visionos"):
            return f"lib{library}.dylib"
        return f"lib{library}.so"
    return f"lib{library}.a"


def library_name(filename: str) -> str:
    """Logical library name for an artifact file, e.g. glfw3.lib and libglfw3.a give glfw3."""
    name = posixpath.basename(filename.replace("\\", "/"))
    if name.endswith(".lib"):
        return name[:-len(".lib")]
    for suffix in LIBRARY_SUFFIXES:
        if name.endswith(suffix):
            name = name[:-len(suffix)]
            break
    if name.startswith("lib") and len(name) > 3:
        name = name[3:]
    return name


def artifact_dir(triple: TargetTriple) -> str:
    return posixpath.join(platform_family(triple), triple.arch)


def expected_artifact(triple: TargetTriple, library: str, kind: str = "static") -> str:
    """Store-relative path the layout convention assigns to library for triple."""
    return posixpath.join(artifact_dir(triple), library_filename(triple, library, kind))


class ArtifactStore:
    """Read-only view of the version-controlled directory of prebuilt libraries."""

    def __init__(self, root):
        self.root = root

    def __repr__(self):
        return f"ArtifactStore({self.root!r})"

    def path(self, artifact: str) -> str:
        return os.path.join(self.root, *artifact.replace("\\", "/").split("/"))

    def contains(self, artifact: str) -> bool:
        """True when artifact is a relative path that stays inside the store root."""
        normalized = posixpath.normpath(artifact.replace("\\", "/"))
        if posixpath.isabs(normalized) or os.path.isabs(artifact):
            return False
        return normalized != "." and not normalized.startswith("../") and normalized != ".."

    def exists(self, artifact: str) -> bool:
        if not self.contains(artifact):
            return False
        path = self.path(artifact)
        if artifact.endswith(".framework"):
            return os.path.isdir(path)
        return os.path.isfile(path)

    def files(self):
        """Yield store-relative paths of every library file in the store."""
        if not os.path.isdir(self.root):
            return
        for current, dirs, files in os.walk(self.root):
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            # A framework bundle is one artifact; its contents are not walked.
            bundles = [d for d in dirs if d.endswith(".framework")]
            dirs[:] = [d for d in dirs if not d.endswith(".framework")]
            for name in sorted(bundles + [f for f in files if not f.startswith(".")]):
                relative = os.path.relpath(os.path.join(current, name), self.root)
                yield relative.replace(os.sep, "/")
