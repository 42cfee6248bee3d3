"""Persisted settings document.

.. code-block:: xml

    <Settings>
      <Type>myapp.Settings</Type>
      <Properties>
        <Hello>World</Hello>
        <StuffILike>
          <Element>Cookies</Element>
          <Element>Cars</Element>
        </StuffILike>
        <Comment null="true" />
      </Properties>
    </Settings>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from cliobj.bind import ParseState, assign, bind_value
from cliobj.coercion import to_string
from cliobj.schema import ArgumentSchema

logger = logging.getLogger(__name__)

ROOT_TAG = "Settings"
TYPE_TAG = "Type"
PROPERTIES_TAG = "Properties"
ELEMENT_TAG = "Element"


def type_name(target: Any) -> str:
    cls = type(target)
    return f"{cls.__module__}.{cls.__qualname__}"


def dumps(schema: ArgumentSchema, target: Any, state: ParseState) -> str:
    """Serialize every argument with ``allow_save`` to an XML string."""
    root = ET.Element(ROOT_TAG)
    ET.SubElement(root, TYPE_TAG).text = type_name(target)
    properties = ET.SubElement(root, PROPERTIES_TAG)

    for descriptor in schema:
        if not descriptor.allow_save:
            continue
        value = descriptor.get(target, state.values)
        node = ET.SubElement(properties, descriptor.name)
        if value is None:
            node.set("null", "true")
        elif descriptor.is_array:
            for element in value:
                ET.SubElement(node, ELEMENT_TAG).text = to_string(element)
        else:
            node.text = to_string(value)

    ET.indent(root)
    return ET.tostring(root, encoding="unicode")


def loads(schema: ArgumentSchema, target: Any, state: ParseState, text: str) -> None:
    """Apply a document produced by :func:`dumps` to ``target``.

    Every restored argument is marked as explicitly set. Unknown elements are ignored;
    values that can't be coerced are recorded in ``state`` like command-line errors.

    Raises
    ------
    xml.etree.ElementTree.ParseError
        ``text`` is not well-formed XML.
    ValueError
        The document has no ``Properties`` section.
    """
    root = ET.fromstring(text)
    properties = root.find(PROPERTIES_TAG)
    if properties is None:
        raise ValueError(f"Settings document has no <{PROPERTIES_TAG}> element.")

    saved_type = root.findtext(TYPE_TAG)
    if saved_type and saved_type != type_name(target):
        logger.debug("Restoring %s settings into %s.", saved_type, type_name(target))

    for node in properties:
        descriptor = schema.lookup(node.tag)
        if descriptor is None or not descriptor.allow_save:
            logger.debug("Ignoring unknown setting <%s>.", node.tag)
            continue
        if node.get("null") == "true":
            assign(target, state, descriptor, None)
        elif descriptor.is_array:
            bind_value(target, state, descriptor, [e.text or "" for e in node.findall(ELEMENT_TAG)])
        else:
            bind_value(target, state, descriptor, node.text or "")


def save(path: str | Path, schema: ArgumentSchema, target: Any, state: ParseState) -> None:
    Path(path).write_text(dumps(schema, target, state), encoding="utf-8")


def restore(path: str | Path, schema: ArgumentSchema, target: Any, state: ParseState) -> bool:
    """Load settings written by :func:`save`.

    Returns
    -------
    bool
        :obj:`False` if ``path`` does not exist.
    """
    path = Path(path)
    if not path.exists():
        return False
    loads(schema, target, state, path.read_text(encoding="utf-8"))
    return True
