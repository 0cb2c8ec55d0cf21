from typing import Any, Mapping, Optional, Sequence

from graphql.language import ArgumentNode, BooleanValueNode, DirectiveNode, VariableNode

SKIP = "skip"
INCLUDE = "include"


def check_value(name: str, value: Any) -> bool:
    """
    Whether a field carrying the `name` directive with the given argument
    value should be returned.
    """
    if name == SKIP:
        return not value
    if name == INCLUDE:
        return bool(value)
    return True


def verify_directive_arg(
    name: str, argument: ArgumentNode, variables: Mapping[str, Any]
) -> bool:
    match getattr(argument, "value", None):
        case BooleanValueNode(value=value):
            return check_value(name, value)
        case VariableNode() as variable:
            return check_value(name, variables.get(variable.name.value))
        case _:
            return True


def verify_directive(directive: DirectiveNode, variables: Mapping[str, Any]) -> bool:
    name = directive.name.value
    if name not in (SKIP, INCLUDE):
        return True

    arguments = getattr(directive, "arguments", None)
    if not isinstance(arguments, (list, tuple)):
        return True

    return all(
        verify_directive_arg(name, argument, variables) for argument in arguments
    )


def verify_directives(
    directives: Optional[Sequence[DirectiveNode]],
    variables: Optional[Mapping[str, Any]],
) -> bool:
    """
    Evaluates the @skip / @include directives of a single selection node.
    Every directive has to allow the node for it to be returned, unknown
    directives and arguments which are neither boolean literals nor variables
    never exclude anything.
    """
    if not directives:
        return True

    variables = variables or {}
    return all(verify_directive(directive, variables) for directive in directives)
