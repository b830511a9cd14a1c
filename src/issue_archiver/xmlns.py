"""Namespace configuration and serialization for generated XML.

Namespace maps are kept here as ordered configuration; generators build
lxml element trees against them and serialize through ``serialize`` so that
every document has the same declaration, encoding and layout.
"""

from lxml import etree

ALTO_NS = "http://www.loc.gov/standards/alto/ns-v4#"
METS_NS = "http://www.loc.gov/METS/"
MODS_NS = "http://www.loc.gov/mods/v3"
XLINK_NS = "http://www.w3.org/1999/xlink"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ALTO_NSMAP = {"alto": ALTO_NS}

METS_NSMAP = {
    "mets": METS_NS,
    "xlink": XLINK_NS,
    "mods": MODS_NS,
    "xsi": XSI_NS,
}

METS_SCHEMA_LOCATION = (
    f"{METS_NS} http://www.loc.gov/standards/mets/mets.xsd "
    f"{MODS_NS} http://www.loc.gov/standards/mods/v3/mods-3-8.xsd"
)


def serialize(root: etree._Element) -> bytes:
    """Serialize an element tree to UTF-8 bytes with an XML declaration."""
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )
