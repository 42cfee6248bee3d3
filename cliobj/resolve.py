from typing import TYPE_CHECKING

from cliobj.exceptions import AmbiguousNameError

if TYPE_CHECKING:
    from cliobj.descriptor import ArgumentDescriptor
    from cliobj.schema import ArgumentSchema


def resolve_name(schema: "ArgumentSchema", token: str) -> "ArgumentDescriptor | None":
    """Resolve a (possibly abbreviated) argument name.

    An exact name/alias match wins immediately. Otherwise every argument with a name
    or alias starting with ``token`` is a candidate.

    Parameters
    ----------
    schema: ArgumentSchema
        Schema to search; its :attr:`~.ArgumentSchema.comparison` decides equality.
    token: str
        Argument name as supplied, with the prefix already removed.

    Raises
    ------
    AmbiguousNameError
        More than one argument starts with ``token``.

    Returns
    -------
    ArgumentDescriptor | None
        The matching argument, or :obj:`None` if nothing matches.
    """
    descriptor = schema.lookup(token)
    if descriptor is not None:
        return descriptor

    comparison = schema.comparison
    candidates = []
    for descriptor in schema.descriptors:
        if any(comparison.startswith(name, token) for name in descriptor.names):
            candidates.append(descriptor)

    if not candidates:
        return None
    if len(candidates) > 1:
        raise AmbiguousNameError(token=token, candidates=candidates)
    return candidates[0]
