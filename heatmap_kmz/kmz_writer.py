from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Dict, Iterable, List, Sequence
from zipfile import ZIP_DEFLATED, ZipFile

from lxml import etree

from .models import EncodedLayer

KML_NS = "http://www.opengis.net/kml/2.2"
MANIFEST_NAME = "doc.kml"
IMAGE_EXT = ".png"
DEFAULT_FOLDER_NAME = "Operators Density Heatmaps"

_UNSAFE_RE = re.compile(r"[\s/\\]+")


def sanitize_filename(label: str, ext: str = IMAGE_EXT) -> str:
    """'Claro Peru' -> 'Claro_Peru.png'. Whitespace and path separators become '_'."""
    stem = _UNSAFE_RE.sub("_", label.strip()) or "layer"
    return f"{stem}{ext}"


def assign_filenames(labels: Iterable[str], ext: str = IMAGE_EXT) -> List[str]:
    """Sanitized names in label order, with _2, _3 ... suffixes on collisions."""
    used: set[str] = set()
    out: List[str] = []
    for label in labels:
        name = sanitize_filename(label, ext)
        stem = name[: -len(ext)] if ext else name
        n = 2
        while name in used:
            name = f"{stem}_{n}{ext}"
            n += 1
        used.add(name)
        out.append(name)
    return out


def _sub(parent: etree._Element, tag: str, text: str | None = None) -> etree._Element:
    el = etree.SubElement(parent, f"{{{KML_NS}}}{tag}")
    if text is not None:
        el.text = text
    return el


def build_kml(layers: Sequence[EncodedLayer], hrefs: Sequence[str], folder_name: str = DEFAULT_FOLDER_NAME) -> bytes:
    """Manifest with one GroundOverlay per layer, in the given order."""
    root = etree.Element(f"{{{KML_NS}}}kml", nsmap={None: KML_NS})
    folder = _sub(root, "Folder")
    _sub(folder, "name", folder_name)
    _sub(folder, "open", "1")

    for layer, href in zip(layers, hrefs):
        overlay = _sub(folder, "GroundOverlay")
        _sub(overlay, "name", layer.label)
        icon = _sub(overlay, "Icon")
        _sub(icon, "href", href)
        box = _sub(overlay, "LatLonBox")
        _sub(box, "north", repr(float(layer.bounds.north)))
        _sub(box, "south", repr(float(layer.bounds.south)))
        _sub(box, "east", repr(float(layer.bounds.east)))
        _sub(box, "west", repr(float(layer.bounds.west)))

    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)


def build_kmz(layers: Iterable[EncodedLayer], folder_name: str = DEFAULT_FOLDER_NAME) -> bytes:
    """Package layers into KMZ bytes: doc.kml first, then one PNG per layer.

    Layers may arrive in any order; they are emitted sorted by label.
    """
    ordered = sorted(layers, key=lambda layer: layer.label)
    hrefs = assign_filenames(layer.label for layer in ordered)
    kml_bytes = build_kml(ordered, hrefs, folder_name=folder_name)

    assets: Dict[str, bytes] = {href: layer.png for href, layer in zip(hrefs, ordered)}
    buf = io.BytesIO()
    with ZipFile(buf, "w", ZIP_DEFLATED) as z:
        z.writestr(MANIFEST_NAME, kml_bytes)
        for rel, data in assets.items():
            z.writestr(rel, data)
    return buf.getvalue()


def write_kmz(zip_path: Path, data: bytes) -> Path:
    zip_path = Path(zip_path)
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    zip_path.write_bytes(data)
    return zip_path
