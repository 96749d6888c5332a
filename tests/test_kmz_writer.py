"""
Tests for KMZ manifest and archive assembly.
"""
import io
import zipfile

import pytest
from lxml import etree

from heatmap_kmz.kmz_writer import KML_NS, assign_filenames, build_kmz, sanitize_filename, write_kmz
from heatmap_kmz.models import EncodedLayer, GeoBounds

NS = {"k": KML_NS}
BOUNDS = GeoBounds(north=-12.0, south=-12.25, east=-76.875, west=-77.125)


def _layer(label, png=b"png-bytes", bounds=BOUNDS):
    return EncodedLayer(label=label, png=png, bounds=bounds)


def _unpack(data):
    z = zipfile.ZipFile(io.BytesIO(data))
    return z, etree.fromstring(z.read("doc.kml"))


class TestFilenames:
    """Label -> archive entry name."""

    def test_whitespace_becomes_underscore(self):
        assert sanitize_filename("Claro Peru") == "Claro_Peru.png"
        assert sanitize_filename("a  b\tc") == "a_b_c.png"

    def test_path_separators_removed(self):
        assert sanitize_filename("A/B\\C") == "A_B_C.png"

    def test_collisions_get_suffix(self):
        assert assign_filenames(["A B", "A_B", "A  B"]) == ["A_B.png", "A_B_2.png", "A_B_3.png"]


class TestBuildKmz:
    """Manifest plus one image per layer."""

    def test_entries_and_manifest_first(self):
        data = build_kmz([_layer("B"), _layer("A")])
        z, _ = _unpack(data)
        assert z.namelist()[0] == "doc.kml"
        assert sorted(z.namelist()) == ["A.png", "B.png", "doc.kml"]
        assert z.read("A.png") == b"png-bytes"

    def test_overlays_sorted_by_label(self):
        _, kml = _unpack(build_kmz([_layer("MOVISTAR"), _layer("CLARO"), _layer("ENTEL")]))
        names = kml.xpath("//k:GroundOverlay/k:name/text()", namespaces=NS)
        hrefs = kml.xpath("//k:GroundOverlay/k:Icon/k:href/text()", namespaces=NS)
        assert names == ["CLARO", "ENTEL", "MOVISTAR"]
        assert hrefs == ["CLARO.png", "ENTEL.png", "MOVISTAR.png"]

    def test_lat_lon_box_values(self):
        other = GeoBounds(north=1.5, south=-0.5, east=2.25, west=-3.125)
        _, kml = _unpack(build_kmz([_layer("A"), _layer("B", bounds=other)]))
        boxes = kml.xpath("//k:LatLonBox", namespaces=NS)
        assert len(boxes) == 2
        for box, expected in zip(boxes, [BOUNDS, other]):
            for side in ("north", "south", "east", "west"):
                assert float(box.findtext(f"k:{side}", namespaces=NS)) == pytest.approx(getattr(expected, side))

    def test_folder_metadata(self):
        _, kml = _unpack(build_kmz([_layer("A")], folder_name="Survey"))
        assert kml.tag == f"{{{KML_NS}}}kml"
        assert kml.findtext("k:Folder/k:name", namespaces=NS) == "Survey"
        assert kml.findtext("k:Folder/k:open", namespaces=NS) == "1"

    def test_labels_are_escaped(self):
        _, kml = _unpack(build_kmz([_layer("AT&T <Mobile>")]))
        assert kml.findtext("k:Folder/k:GroundOverlay/k:name", namespaces=NS) == "AT&T <Mobile>"

    def test_manifest_is_utf8_xml(self):
        z, _ = _unpack(build_kmz([_layer("TELEFÓNICA")]))
        raw = z.read("doc.kml")
        assert raw.startswith(b"<?xml")
        assert "TELEFÓNICA".encode("utf-8") in raw

    def test_empty_layer_list(self):
        z, kml = _unpack(build_kmz([]))
        assert z.namelist() == ["doc.kml"]
        assert kml.xpath("//k:GroundOverlay", namespaces=NS) == []

    def test_write_kmz_creates_parents(self, tmp_path):
        out = write_kmz(tmp_path / "KMZ" / "out.kmz", build_kmz([_layer("A")]))
        assert out.exists()
        assert zipfile.is_zipfile(out)
