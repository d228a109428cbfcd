import json
import os
import re
import subprocess
import sys

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "data", "sample_ride.gpx"
)


def run_cli(*args, cwd=None):
    return subprocess.run(
        [sys.executable, "-m", "ride_analyzer", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
    )


class TestCli:
    def test_run_with_sample_file(self):
        result = run_cli(SAMPLE_GPX_PATH)
        assert result.returncode == 0
        output = result.stdout
        assert "GPX Ride Analysis" in output
        assert "Name:           Morning Ride" in output
        assert "Distance:" in output
        assert "Duration:" in output
        assert "Moving Time:" in output
        assert "Avg Speed:" in output
        assert "Max Speed:" in output
        assert "Elevation Gain: 100 m" in output
        assert "Elevation Loss: 95 m" in output
        assert "Heart Rate Zones:" in output
        assert "Speed Zones:" in output
        assert "Normalized Power: 220 W" in output
        assert "1 climbs, 1 descents, 0 flats" in output
        assert "Climbing:       1.00 km, descending: 0.95 km" in output

    def test_calories_line(self):
        result = run_cli(SAMPLE_GPX_PATH)
        match = re.search(r"Calories:\s+(\d+) kcal \((\w+)\)", result.stdout)
        assert match is not None
        assert int(match.group(1)) == 309
        assert match.group(2) == "power"

    def test_json_output(self):
        result = run_cli("--json", "--mass", "68", SAMPLE_GPX_PATH)
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["name"] == "Morning Ride"
        assert data["summary"]["point_count"] == 40
        assert data["summary"]["rider_weight"] == 68.0
        assert len(data["points"]) == 40
        assert [s["type"] for s in data["segments"]] == ["climb", "descent"]

    def test_max_hr_option(self):
        result = run_cli("--json", "--max-hr", "160", SAMPLE_GPX_PATH)
        assert result.returncode == 0
        zones = json.loads(result.stdout)["analysis"]["heart_rate_zones"]
        assert zones["Zone 5 (90-100%)"] > 0

    def test_local_config_file(self, tmp_path):
        (tmp_path / "ride-analyzer.json").write_text(json.dumps({"rider_weight": 61.5}))
        result = run_cli("--json", SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode == 0
        assert json.loads(result.stdout)["summary"]["rider_weight"] == 61.5

    def test_verbose_logs_to_stderr(self):
        result = run_cli("--verbose", SAMPLE_GPX_PATH)
        assert result.returncode == 0
        assert "Extracted 40 points" in result.stderr

    def test_nonexistent_file(self):
        result = run_cli("/nonexistent/file.gpx")
        assert result.returncode != 0
        assert "Error" in result.stderr

    def test_malformed_file(self, tmp_path):
        bad = tmp_path / "broken.gpx"
        bad.write_text("<gpx><trk>")
        result = run_cli(str(bad))
        assert result.returncode != 0
        assert "Error parsing GPX file" in result.stderr

    def test_latin1_file(self, tmp_path):
        path = tmp_path / "latin1.gpx"
        path.write_bytes(
            b"<?xml version=\"1.0\" encoding=\"ISO-8859-1\"?>"
            b"<gpx version=\"1.1\" xmlns=\"http://www.topografix.com/GPX/1/1\">"
            b"<metadata><name>Col d\xe9t\xe9</name></metadata>"
            b"<trk><trkseg><trkpt lat=\"45.0\" lon=\"6.0\"/><trkpt lat=\"45.001\" lon=\"6.0\"/></trkseg></trk></gpx>"
        )
        result = run_cli("--json", str(path))
        assert result.returncode == 0
        assert json.loads(result.stdout)["metadata"]["name"] == "Col d\u00e9t\u00e9"

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "mislabeled.gpx"
        path.write_bytes(
            b"<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
            b"<gpx version=\"1.1\"><metadata><name>\xe9t\xe9</name></metadata></gpx>"
        )
        result = run_cli(str(path))
        assert result.returncode == 1
        assert "Error parsing GPX file" in result.stderr
        assert "Traceback" not in result.stderr

    def test_file_without_tracks(self, tmp_path):
        empty = tmp_path / "empty.gpx"
        empty.write_text(
            '<?xml version="1.0"?>\n'
            '<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1"></gpx>'
        )
        result = run_cli(str(empty))
        assert result.returncode != 0
        assert "No track data found" in result.stderr

    def test_no_arguments(self):
        result = run_cli()
        assert result.returncode != 0
