"""Rule registry - per-engine mapping from (kind, rule name) to constructor."""
from __future__ import annotations

import threading

from fieldrules.errors import unknown_kind, unknown_rule
from fieldrules.logging import registry_logger
from .errors import RuleConstructor
from .rules import BUILTIN_RULES
from .schema import Kind

log = registry_logger()

# Kinds that carry rules of their own. OPTIONAL resolves through its inner kind.
RULE_KINDS = frozenset({Kind.INTEGER, Kind.FLOAT, Kind.TEXT, Kind.BOOLEAN, Kind.RECORD, Kind.COLLECTION})


def _as_kind(kind: Kind | str) -> Kind:
    try: return Kind(kind)
    except ValueError as e: raise unknown_kind(kind) from e


class RuleRegistry:
    """Rule constructors by kind and name.

    Reads and writes are serialized by a re-entrant lock, so rules may be
    registered while other threads compile. Already compiled types keep the
    checks they were built with.
    """

    def __init__(self, *, builtins: bool = True):
        self._lock = threading.RLock()
        self._rules: dict[Kind, dict[str, RuleConstructor]] = {}
        if builtins:
            for kind, constructors in BUILTIN_RULES.items():
                self._rules[kind] = dict(constructors)

    def register(self, kind: Kind | str, name: str, constructor: RuleConstructor) -> None:
        """Add or replace the constructor for ``name`` on ``kind``."""
        kind = _as_kind(kind)
        if kind not in RULE_KINDS: raise unknown_kind(kind, name)
        if not name or not name.strip(): raise unknown_rule(kind, name, self.rules_for(kind))
        with self._lock:
            replaced = name in self._rules.get(kind, {})
            self._rules.setdefault(kind, {})[name] = constructor
        log.debug("rule_registered", kind=kind.value, rule=name, replaced=replaced)

    def resolve(self, kind: Kind | str, name: str) -> RuleConstructor:
        """Constructor for ``name`` on ``kind``; ConfigurationError when missing."""
        kind = _as_kind(kind)
        with self._lock:
            constructors = self._rules.get(kind)
            if constructors is None: raise unknown_kind(kind, name)
            if name not in constructors: raise unknown_rule(kind, name, constructors)
            return constructors[name]

    def rules_for(self, kind: Kind | str) -> list[str]:
        kind = _as_kind(kind)
        with self._lock: return list(self._rules.get(kind, {}))

    def copy(self) -> RuleRegistry:
        clone = RuleRegistry(builtins=False)
        with self._lock:
            clone._rules = {kind: dict(constructors) for kind, constructors in self._rules.items()}
        return clone

    def __contains__(self, key: tuple[Kind | str, str]) -> bool:
        kind, name = key
        try: kind = Kind(kind)
        except ValueError: return False
        with self._lock: return name in self._rules.get(kind, {})
