"""Name to value mapping used both as the global namespace and as procedure call scopes.

There is no chain of scopes: extend copies the mapping and overlays new bindings, and the copy is independent of the
original from then on. A closure therefore sees the bindings that existed when it was created, not later ones.
"""

from schemelin.lang.error import UnboundIdentifier


class Environment:

    def __init__(self, bindings=None):
        self.bindings = dict(bindings) if bindings else {}

    def lookup(self, name):
        """Returns the value bound to name, raising UnboundIdentifier if there is none."""
        try:
            return self.bindings[name]
        except KeyError:
            raise UnboundIdentifier(name) from None

    def define(self, name, value):
        """Inserts or overwrites name in this mapping."""
        self.bindings[name] = value

    def assign(self, name, value):
        """Rebinds name only if it is already bound here. Returns whether it was."""
        if name not in self.bindings:
            return False
        self.bindings[name] = value
        return True

    def extend(self, bindings=None):
        """Returns a new, independent Environment equal to this one overlaid with bindings."""
        extended = Environment(self.bindings)
        if bindings:
            extended.bindings.update(bindings)
        return extended

    def __contains__(self, name):
        return name in self.bindings

    def __len__(self):
        return len(self.bindings)

    def __repr__(self):
        return f"Environment({len(self.bindings)} bindings)"
