from typer.testing import CliRunner

from kdsearch.main import app

runner = CliRunner()


class TestCli:
    def write_points(self, tmp_path):
        path = tmp_path / "points.csv"
        path.write_text("0,0\n1,1\n2,2\n3,3\n4,4\n")
        return str(path)

    def test_knn(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(app, ["knn", path, "--target", "2.1,2.1", "-k", "1"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("2,2\t")

    def test_radius(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(
            app,
            ["radius", path, "--center", "0,0", "--radius", "2", "--metric", "euclidean"],
        )
        assert result.exit_code == 0, result.output
        assert [x.split("\t")[0] for x in result.stdout.splitlines()] == ["0,0", "1,1"]

    def test_info(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(app, ["info", path])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == [
            "count: 5",
            "dimensions: 2",
            "capacity: 8",
            "height: 3",
        ]

    def test_run_config(self, tmp_path):
        path = self.write_points(tmp_path)
        config = tmp_path / "config.yaml"
        config.write_text(
            "tree:\n"
            "  metric: euclidean\n"
            "queries:\n"
            "  - kind: knn\n"
            "    target: [4, 4]\n"
            "    k: 2\n"
            "  - kind: radius\n"
            "    target: [0, 0]\n"
            "    radius: 0.5\n"
        )
        result = runner.invoke(app, ["run", path, "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == [
            "# query 0: knn 4,4",
            "4,4\t0",
            "3,3\t1.41421",
            "# query 1: radius 0,0",
            "0,0\t0",
        ]

    def test_verbose_logs(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(
            app, ["knn", path, "--target", "0,0", "--verbose"]
        )
        assert result.exit_code == 0, result.output
        assert "[build]" in result.stdout
        assert "[query]" in result.stdout

    def test_dimension_mismatch(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(app, ["knn", path, "--target", "1,2,3"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unknown_metric(self, tmp_path):
        path = self.write_points(tmp_path)
        result = runner.invoke(app, ["info", path, "--metric", "cosine"])
        assert result.exit_code == 1
        assert "Unknown metric" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["info", str(tmp_path / "missing.csv")])
        assert result.exit_code == 1
