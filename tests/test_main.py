"""
Tests for input discovery, output paths and the CLI entry point.
"""
import zipfile

from heatmap_kmz.file_discovery import find_csv_files
from heatmap_kmz.io_utils import derive_output_path, resolve_input_paths
from main import run

CSV = "gps_latitude,gps_longitude,carrier\n" + "\n".join(
    f"{-12.0 - i * 0.001},{-77.0 - (i % 7) * 0.002},{'CLARO' if i % 2 else 'ENTEL'}" for i in range(40)
)


class TestDiscovery:
    """Finding CSV inputs."""

    def test_files_and_folders(self, tmp_path):
        (tmp_path / "sub").mkdir()
        a = tmp_path / "sub" / "a.CSV"
        b = tmp_path / "b.csv"
        for p in (a, b):
            p.write_text(CSV)
        (tmp_path / "sub" / "._a.csv").write_text("junk")
        (tmp_path / "notes.txt").write_text("x")

        assert find_csv_files([tmp_path]) == sorted([a.resolve(), b.resolve()])
        assert find_csv_files([b, tmp_path / "sub"]) == sorted([a.resolve(), b.resolve()])

    def test_resolve_skips_missing(self, tmp_path):
        assert resolve_input_paths([str(tmp_path), str(tmp_path / "nope"), str(tmp_path)]) == [tmp_path.resolve()]

    def test_output_path(self, tmp_path):
        (tmp_path / "x").mkdir()
        (tmp_path / "y").mkdir()
        f = tmp_path / "x" / "a.csv"
        f.write_text(CSV)
        assert derive_output_path([tmp_path / "x"], "o.kmz") == (tmp_path / "x" / "o.kmz").resolve()
        assert derive_output_path([f], "o.kmz") == (tmp_path / "x" / "o.kmz").resolve()
        assert derive_output_path([tmp_path / "x", tmp_path / "y"], "o.kmz") == (tmp_path / "o.kmz").resolve()


class TestRun:
    """CLI end to end."""

    def test_run_writes_kmz(self, tmp_path, monkeypatch):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "survey.csv").write_text(CSV)
        (data_dir / "broken.csv").write_text("foo,bar\n1,2\n")
        (tmp_path / "config.yaml").write_text(
            "processing:\n  grid_resolution: 24\n  blur_radius: 1.5\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        out = run([str(data_dir)])
        assert out == (data_dir / "Density_Heatmaps.kmz").resolve()
        with zipfile.ZipFile(out) as z:
            assert sorted(z.namelist()) == ["CLARO.png", "ENTEL.png", "doc.kml"]

    def test_run_without_valid_input(self, tmp_path, monkeypatch):
        (tmp_path / "broken.csv").write_text("foo,bar\n1,2\n")
        monkeypatch.chdir(tmp_path)
        assert run([str(tmp_path)]) is None

    def test_run_with_bad_config(self, tmp_path, monkeypatch):
        (tmp_path / "survey.csv").write_text(CSV)
        (tmp_path / "config.yaml").write_text("columns:\n  heading: h\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert run([str(tmp_path)]) is None
        assert not (tmp_path / "Density_Heatmaps.kmz").exists()
