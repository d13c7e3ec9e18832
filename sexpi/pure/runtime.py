"""Runtime values and environments for sexpi.

Environments are immutable. Binding a name never changes an existing environment: it returns a new one whose parent
is the old one, so closures can share the snapshot they captured instead of copying it. The newest binding of a name
shadows older ones without erasing them.
"""

from dataclasses import dataclass


class Value:
    """Superclass of every runtime value. kind names the value in error messages."""
    kind = "value"


@dataclass(frozen=True)
class IntValue(Value):
    value: int
    kind = "int"

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class FloatValue(Value):
    value: float
    kind = "float"

    def __str__(self):
        return repr(self.value)


@dataclass(frozen=True)
class BoolValue(Value):
    value: bool
    kind = "bool"

    def __str__(self):
        return "#t" if self.value else "#f"


@dataclass(frozen=True, eq=False)
class Closure(Value):
    """Function value: a parameter and body paired with the environment in effect when the lambda was evaluated.
    Closures compare by identity.
    """
    param: str
    body: object
    env: "Environment"
    kind = "closure"

    def __str__(self):
        return f"<closure (lambda ({self.param}) {self.body.expr})>"


class Environment:
    """Immutable, parent-linked scope chain. Each link holds one binding; the empty environment holds none."""

    def __init__(self, name=None, value=None, parent=None):
        self._name = name
        self._value = value
        self._parent = parent
        self._size = 0 if name is None else 1 + (len(parent) if parent is not None else 0)

    @classmethod
    def from_mapping(cls, mapping):
        """Builds an environment binding every item of mapping, in iteration order."""
        env = cls()
        for name, value in mapping.items():
            env = env.bind(name, value)
        return env

    def bind(self, name, value):
        """Returns a new environment equal to this one plus name bound to value."""
        return Environment(name, value, self)

    def lookup(self, name):
        """Returns the newest value bound to name, raising a KeyError if there is none."""
        env = self
        while env is not None and env._name is not None:
            if env._name == name:
                return env._value
            env = env._parent
        raise KeyError(name)

    def to_dict(self):
        """Flattens the chain into a dict of the visible bindings."""
        visible = {}
        env = self
        while env is not None and env._name is not None:
            visible.setdefault(env._name, env._value)
            env = env._parent
        return visible

    def __contains__(self, name):
        try:
            self.lookup(name)
        except KeyError:
            return False
        return True

    def __len__(self):
        """Number of bindings in the chain, shadowed ones included."""
        return self._size

    def __repr__(self):
        bindings = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"Environment({bindings})"
