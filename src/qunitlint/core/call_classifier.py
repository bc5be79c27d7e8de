"""Call Classifier - Recognises module, test and hook calls."""

from qunitlint.config import IdentifiersConfig
from qunitlint.models import (
    Argument,
    ArgumentKind,
    CallNode,
    Declaration,
    DeclarationKind,
    HookProperty,
    Identifier,
    QualifiedMember,
    SourceLocation,
)


class CallClassifier:
    """Classifies call expressions as declarations or lifecycle hooks."""

    def __init__(self, config: IdentifiersConfig | None = None):
        """Initialize with optional identifier configuration.

        Args:
            config: Identifier config naming the module/test/hook callees
        """
        self._config = config or IdentifiersConfig()
        self._module_names = frozenset(self._config.module_callees)
        self._test_names = frozenset(self._config.test_callees)
        self._hook_names = frozenset(self._config.hook_names)

    def classify(self, node: CallNode) -> Declaration | HookProperty | None:
        """Classify a call node.

        Returns:
            A Declaration for module/test calls, a HookProperty for
            ``hooks.<name>()`` calls, or None for anything else
        """
        callee = node.callee
        if callee is None:
            return None

        name = self._declared_name(callee)
        if name in self._module_names:
            return self._module_declaration(node)
        if name in self._test_names:
            return self._test_declaration(node)

        if (
            isinstance(callee, QualifiedMember)
            and callee.object != self._config.qualifier
            and callee.property in self._hook_names
        ):
            return HookProperty(name=callee.property, location=node.location, owner=callee.object)
        return None

    def _declared_name(self, callee: Identifier | QualifiedMember) -> str | None:
        """Resolve the callee to the framework function it names, if any."""
        if isinstance(callee, Identifier):
            return callee.name
        if callee.object == self._config.qualifier:
            return callee.property
        return None

    def _test_declaration(self, node: CallNode) -> Declaration:
        name, name_location = _literal_name(node.args)
        return Declaration(
            kind=DeclarationKind.TEST,
            callee=node.callee,
            location=node.location,
            name=name,
            name_location=name_location,
        )

    def _module_declaration(self, node: CallNode) -> Declaration:
        name, name_location = _literal_name(node.args)

        # module(name, options?, body?)
        body: Argument | None = None
        hooks: tuple[HookProperty, ...] = ()
        for arg in node.args[1:3]:
            if arg.kind == ArgumentKind.FUNCTION:
                body = arg
            elif arg.kind == ArgumentKind.OBJECT and body is None:
                hooks = tuple(
                    HookProperty(name=key.name, location=key.location)
                    for key in arg.keys
                    if key.name in self._hook_names
                )

        return Declaration(
            kind=DeclarationKind.MODULE,
            callee=node.callee,
            location=node.location,
            name=name,
            name_location=name_location,
            body=body,
            hooks=hooks,
        )


def _literal_name(
    args: tuple[Argument, ...],
) -> tuple[str | None, SourceLocation | None]:
    """Get the first argument's value and location if it is a string literal."""
    if args and args[0].kind == ArgumentKind.STRING:
        return args[0].value, args[0].location
    return None, None
