from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ParseError, RegistryError

COMPONENTS = ("arch", "vendor", "os", "env")

ARCHITECTURES = (
    "x86_64", "i686", "i586",
    "aarch64", "arm64ec", "arm", "armv5te", "armv7", "armv7a",
    "thumbv7a", "thumbv7neon",
    "riscv32imac", "riscv64gc",
    "powerpc64", "powerpc64le", "s390x", "loongarch64", "mips64", "sparc64",
    "wasm32", "wasm64",
)

VENDORS = (
    "pc", "unknown", "apple", "uwp", "win7",
    "nvidia", "fortanix", "wrs", "sun", "sony", "nintendo", "kmc", "openwrt",
)

OPERATING_SYSTEMS = (
    "windows", "linux", "darwin", "macos", "ios", "tvos", "watchos", "visionos",
    "android", "freebsd", "netbsd", "openbsd", "dragonfly", "illumos", "solaris",
    "fuchsia", "redox", "haiku", "hermit", "vxworks", "nto", "uefi", "cuda",
    "wasi", "emscripten", "none", "unknown",
)

ENVIRONMENTS = (
    "msvc", "gnu", "gnullvm", "gnux32", "gnueabi", "gnueabihf",
    "musl", "musleabi", "musleabihf", "uclibc", "ohos",
    "android", "androideabi", "eabi", "eabihf", "elf", "sgx",
    "sim", "macabi", "p1", "p2",
)


@dataclass(frozen=True)
class Vocabulary:
    """The known spellings of every triple component."""

    architectures: Tuple[str, ...] = ARCHITECTURES
    vendors: Tuple[str, ...] = VENDORS
    operating_systems: Tuple[str, ...] = OPERATING_SYSTEMS
    environments: Tuple[str, ...] = ENVIRONMENTS

    def extend(self, architectures=(), vendors=(), operating_systems=(), environments=()):
        """Return a vocabulary with the extra spellings appended."""
        return Vocabulary(
            architectures=_merge(self.architectures, architectures),
            vendors=_merge(self.vendors, vendors),
            operating_systems=_merge(self.operating_systems, operating_systems),
            environments=_merge(self.environments, environments),
        )

    def ordered(self):
        # Longest spelling first so "armv7a" wins over "arm" before backtracking.
        return tuple(
            tuple(sorted(words, key=len, reverse=True))
            for words in (self.architectures, self.vendors, self.operating_systems, self.environments)
        )


def _merge(base, extra):
    merged = list(base)
    for word in extra:
        if word and word not in merged:
            merged.append(word)
    return tuple(merged)


DEFAULT_VOCABULARY = Vocabulary()


def vocabulary_from_config(conf: dict) -> Vocabulary:
    """Build the vocabulary for a project, honouring its [vocabulary] table."""
    extra = conf.get("vocabulary", {}) if conf else {}
    if not isinstance(extra, dict):
        raise RegistryError("The [vocabulary] section must be a table")
    if not extra:
        return DEFAULT_VOCABULARY
    return DEFAULT_VOCABULARY.extend(
        architectures=_words(extra, "architectures"),
        vendors=_words(extra, "vendors"),
        operating_systems=_words(extra, "operating_systems"),
        environments=_words(extra, "environments"),
    )


def _words(table, key):
    words = table.get(key, [])
    if not isinstance(words, list) or not all(isinstance(word, str) for word in words):
        raise RegistryError(f"vocabulary.{key} must be a list of strings")
    return tuple(words)


@dataclass(frozen=True)
class TargetTriple:
    arch: str
    vendor: str
    os: str
    env: str

    def __post_init__(self):
        for name in COMPONENTS:
            if not getattr(self, name):
                raise ParseError(self._joined(), f"component '{name}' is empty")

    def _joined(self):
        return "-".join(getattr(self, name) or "" for name in COMPONENTS)

    def __str__(self):
        return self._joined()

    @property
    def components(self):
        return tuple(getattr(self, name) for name in COMPONENTS)


def _match(raw, vocabularies):
    """Match raw against the remaining component vocabularies, backtracking on failure."""
    head, rest = vocabularies[0], vocabularies[1:]
    for candidate in head:
        if not rest:
            if raw == candidate:
                return (candidate,)
            continue
        if raw.startswith(candidate + "-"):
            tail = _match(raw[len(candidate) + 1:], rest)
            if tail is not None:
                return (candidate,) + tail
    return None


def _diagnose(raw, vocabulary):
    parts = raw.split("-")
    if len(parts) < len(COMPONENTS):
        return f"expected {len(COMPONENTS)} components (arch-vendor-os-env), got {len(parts)}"
    if not any(raw.startswith(arch + "-") for arch in vocabulary.architectures):
        return f"unknown architecture '{parts[0]}'"
    return "unrecognized vendor/os/environment combination"


def resolve(raw: str, vocabulary: Optional[Vocabulary] = None) -> TargetTriple:
    """
    Parses a target triple string such as ``x86_64-pc-windows-msvc``.

    Components are matched against the known vocabulary rather than split on
    hyphens, so a component spelled with a hyphen is still recognised.

    Args:
        raw: The triple string as handed over by the build toolchain.
        vocabulary: The component spellings to accept. Defaults to the built-in set.

    Returns:
        The parsed TargetTriple.

    Raises:
        ParseError: If the string is empty, has too few components, or does not
            match any known architecture/vendor/os/environment combination.
    """
    vocabulary = vocabulary or DEFAULT_VOCABULARY
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError(raw, "triple is empty")
    raw = raw.strip()
    matched = _match(raw, vocabulary.ordered())
    if matched is None:
        raise ParseError(raw, _diagnose(raw, vocabulary))
    return TargetTriple(*matched)
