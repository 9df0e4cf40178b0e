import posixpath
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from . import config as config_module
from .errors import OverrideNotFound, ParseError, RegistryError
from .store import ArtifactEntry, library_name
from .triple import TargetTriple, Vocabulary, resolve, vocabulary_from_config

LINK_KINDS = ("static", "dylib", "framework")


@dataclass(frozen=True)
class LinkConfiguration:
    artifact: str
    library: str
    kind: str = "static"
    override: bool = True

    @property
    def artifact_dir(self):
        return posixpath.dirname(self.artifact)


@dataclass(frozen=True)
class OverrideRule:
    triple: TargetTriple
    config: LinkConfiguration

    def to_table(self):
        return {
            "artifact": self.config.artifact,
            "library": self.config.library,
            "kind": self.config.kind,
        }


def make_rule(triple: TargetTriple, artifact: str, library: Optional[str] = None, kind: str = "static") -> OverrideRule:
    """Build an OverrideRule, deriving the library name from the artifact file when omitted."""
    if not artifact or not isinstance(artifact, str):
        raise RegistryError(f"Override for '{triple}' has no artifact path")
    # One spelling per artifact, so "a/./b" and "a//b" collide with "a/b".
    artifact = posixpath.normpath(artifact.replace("\\", "/"))
    if library is not None and not isinstance(library, str):
        raise RegistryError(f"Override for '{triple}' has a non-string library name")
    if kind not in LINK_KINDS:
        raise RegistryError(
            f"Override for '{triple}' has unknown link kind '{kind}'. Expected one of: {', '.join(LINK_KINDS)}"
        )
    return OverrideRule(triple, LinkConfiguration(artifact, library or library_name(artifact), kind))


def rule_from_table(key, table, vocabulary: Optional[Vocabulary] = None) -> OverrideRule:
    try:
        triple = resolve(key, vocabulary)
    except ParseError as e:
        raise RegistryError(f"Invalid target section [target.{key}]: {e}") from e
    if str(triple) != key:
        raise RegistryError(f"Target section [target.{key}] is not a canonical triple")
    if not isinstance(table, dict):
        raise RegistryError(f"Target section [target.{key}] must be a table")
    return make_rule(
        triple,
        table.get("artifact"),
        library=table.get("library"),
        kind=table.get("kind", "static"),
    )


class OverrideRegistry:
    """
    Immutable snapshot of the maintainer-curated triple -> link configuration map.

    Lookups are by exact TargetTriple equality; a triple that is not listed is
    never matched against a listed one that shares its architecture or OS.
    """

    def __init__(self, rules=(), source=None):
        by_triple = {}
        by_artifact = {}
        for rule in rules:
            if rule.triple in by_triple:
                raise RegistryError(f"Duplicate override for target '{rule.triple}'")
            owner = by_artifact.get(rule.config.artifact)
            if owner is not None:
                raise RegistryError(
                    f"Targets '{owner}' and '{rule.triple}' both point at artifact {rule.config.artifact}"
                )
            by_triple[rule.triple] = rule
            by_artifact[rule.config.artifact] = rule.triple
        self._rules = MappingProxyType(by_triple)
        self.source = source

    def __repr__(self):
        return f"OverrideRegistry({len(self)} rules, source={self.source!r})"

    def __len__(self):
        return len(self._rules)

    def __contains__(self, triple):
        return triple in self._rules

    def __iter__(self):
        return iter(self.rules())

    def __eq__(self, other):
        if not isinstance(other, OverrideRegistry):
            return NotImplemented
        return dict(self._rules) == dict(other._rules)

    def rules(self):
        return sorted(self._rules.values(), key=lambda rule: str(rule.triple))

    def lookup(self, triple: TargetTriple) -> LinkConfiguration:
        try:
            return self._rules[triple].config
        except KeyError:
            raise OverrideNotFound(triple) from None

    def get(self, triple: TargetTriple) -> Optional[LinkConfiguration]:
        rule = self._rules.get(triple)
        return rule.config if rule else None

    def entries(self):
        return [ArtifactEntry(rule.triple, rule.config.artifact, rule.config.library) for rule in self.rules()]

    def add(self, rule: OverrideRule, replace=False):
        if rule.triple in self._rules and not replace:
            raise RegistryError(f"An override for target '{rule.triple}' already exists")
        rules = [r for r in self._rules.values() if r.triple != rule.triple]
        return OverrideRegistry(rules + [rule], source=self.source)

    def remove(self, triple: TargetTriple):
        if triple not in self._rules:
            raise OverrideNotFound(triple)
        return OverrideRegistry([r for r in self._rules.values() if r.triple != triple], source=self.source)

    def to_tables(self):
        return {str(rule.triple): rule.to_table() for rule in self.rules()}


def registry_from_config(conf, vocabulary: Optional[Vocabulary] = None, source=None) -> OverrideRegistry:
    vocabulary = vocabulary or vocabulary_from_config(conf)
    targets = conf.get("target", {})
    if not isinstance(targets, dict):
        raise RegistryError("The [target] section must be a table of triples")
    rules = [rule_from_table(key, table, vocabulary) for key, table in targets.items()]
    return OverrideRegistry(rules, source=source)


def load_registry(path=".", vocabulary: Optional[Vocabulary] = None) -> OverrideRegistry:
    """Read the [target.<triple>] sections of nativelink.toml into a registry snapshot."""
    conf = config_module.read_config(path)
    return registry_from_config(conf, vocabulary, source=config_module.config_path(path))


def store_registry(conf, registry: OverrideRegistry, path="."):
    """Write registry back into conf's [target] sections and save nativelink.toml."""
    conf["target"] = registry.to_tables()
    return config_module.save_config(conf, path=path)
