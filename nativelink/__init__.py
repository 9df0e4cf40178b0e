from .errors import NativeLinkError, ParseError, OverrideNotFound, ArtifactMissing, RegistryError
from .triple import TargetTriple, resolve
from .registry import LinkConfiguration, OverrideRule, OverrideRegistry, load_registry
from .emitter import BuildDirectives, emit
from .strategy import UseOverride, UseDefault, select_strategy
