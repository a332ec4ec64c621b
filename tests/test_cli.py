"""Tests for CLI commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from nutritrack.cli import app

runner = CliRunner()

TARGET_ARGS = [
    "targets", "--weight", "70", "--height", "175", "--age", "25",
    "--gender", "male", "--activity", "moderate", "--goal", "lose_weight",
]


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "nutrition" in result.output.lower()

    def test_targets_requires_metrics(self):
        result = runner.invoke(app, ["targets"])
        assert result.exit_code != 0


class TestTargetsCommand:
    """Tests for the targets command."""

    def test_targets_json(self):
        result = runner.invoke(app, TARGET_ARGS + ["--json"])
        assert result.exit_code == 0
        response = json.loads(result.stdout)
        assert response["success"] is True
        assert response["data"]["targets"] == {
            "calories": 2172, "protein": 126, "carbohydrates": 282, "fat": 60,
        }
        assert response["data"]["projection"] is None

    def test_targets_table(self):
        result = runner.invoke(app, TARGET_ARGS)
        assert result.exit_code == 0
        assert "2172" in result.output
        assert "Calories" in result.output

    def test_targets_with_body_fat(self):
        result = runner.invoke(
            app, TARGET_ARGS + ["--body-fat", "20", "--target-body-fat", "12", "--json"]
        )
        assert result.exit_code == 0
        projection = json.loads(result.stdout)["data"]["projection"]
        assert projection["weeks_to_target"] == 13

    def test_targets_invalid_weight(self):
        args = list(TARGET_ARGS)
        args[args.index("70")] = "0"
        result = runner.invoke(app, args + ["--json"])
        assert result.exit_code == 1
        response = json.loads(result.stdout)
        assert response["success"] is False
        assert "weight" in response["errors"][0]

    def test_targets_non_finite_weight(self):
        for value in ("nan", "inf"):
            args = list(TARGET_ARGS)
            args[args.index("70")] = value
            result = runner.invoke(app, args + ["--json"])
            assert result.exit_code == 1
            response = json.loads(result.stdout)
            assert response["success"] is False
            assert "weight" in response["errors"][0]

    def test_targets_invalid_goal(self):
        args = list(TARGET_ARGS)
        args[args.index("lose_weight")] = "bulk"
        result = runner.invoke(app, args)
        assert result.exit_code == 1

    def test_strict_activity_from_config(self, tmp_path):
        config = tmp_path / "strict.yaml"
        config.write_text("nutrition:\n  strict_activity_level: true\n")
        args = list(TARGET_ARGS)
        args[args.index("moderate")] = "extreme"
        result = runner.invoke(app, ["--config", str(config)] + args + ["--json"])
        assert result.exit_code == 1
        assert "activity_level" in json.loads(result.stdout)["errors"][0]


class TestBodyCompositionCommands:
    """Tests for lean-mass and timeline."""

    def test_lean_mass(self):
        result = runner.invoke(app, ["lean-mass", "80", "25", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["lean_body_mass_kg"] == 60.0

    def test_lean_mass_rejects_bad_body_fat(self):
        result = runner.invoke(app, ["lean-mass", "80", "120"])
        assert result.exit_code == 1

    def test_lean_mass_rejects_non_finite_weight(self):
        result = runner.invoke(app, ["lean-mass", "inf", "25", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False

    def test_timeline(self):
        result = runner.invoke(
            app,
            ["timeline", "--weight", "80", "--body-fat", "25",
             "--target-body-fat", "15", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["weeks_to_target"] == 19

    def test_timeline_rejects_100_percent(self):
        result = runner.invoke(
            app,
            ["timeline", "--weight", "80", "--body-fat", "25",
             "--target-body-fat", "100"],
        )
        assert result.exit_code == 1

    def test_timeline_zero_weekly_rate_in_config(self, tmp_path):
        config = tmp_path / "zero.yaml"
        config.write_text("nutrition:\n  weekly_change_kg: 0\n")
        result = runner.invoke(
            app,
            ["--config", str(config), "timeline", "--weight", "80",
             "--body-fat", "25", "--target-body-fat", "15", "--json"],
        )
        assert result.exit_code == 1
        response = json.loads(result.stdout)
        assert response["success"] is False
        assert "weekly_change_kg" in response["errors"][0]

    def test_malformed_config_file(self, tmp_path):
        config = tmp_path / "broken.yaml"
        config.write_text("nutrition: [unclosed\n")
        result = runner.invoke(
            app, ["--config", str(config), "lean-mass", "80", "25"]
        )
        assert result.exit_code == 1
        assert "Could not parse" in result.output


class TestLookupCommand:
    """Tests for the lookup command."""

    def test_lookup_food(self):
        result = runner.invoke(app, ["lookup", "chicken breast", "150", "grams", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["matched"] == "chicken breast"
        assert data["nutrition"]["calories"] == 247.5

    def test_lookup_description(self):
        result = runner.invoke(app, ["lookup", "--description", "rajma rice", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["nutrition"]["calories"] == 400

    def test_lookup_requires_arguments(self):
        result = runner.invoke(app, ["lookup", "rice"])
        assert result.exit_code == 1


class TestDayCommand:
    """Tests for the day summary command."""

    def test_day_json(self, entries_file, profile_file):
        result = runner.invoke(
            app,
            ["day", str(entries_file), "--profile", str(profile_file),
             "--date", "2026-10-19", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["totals"]["calories"] == 719
        assert data["targets"]["calories"] == 2172
        assert data["remaining_calories"] == 1453

    def test_day_table(self, entries_file, profile_file):
        result = runner.invoke(
            app,
            ["day", str(entries_file), "--profile", str(profile_file),
             "--date", "2026-10-19"],
        )
        assert result.exit_code == 0
        assert "Breakfast" in result.output
        assert "Remaining" in result.output

    def test_day_invalid_date(self, entries_file, profile_file):
        result = runner.invoke(
            app,
            ["day", str(entries_file), "--profile", str(profile_file),
             "--date", "19/10/2026"],
        )
        assert result.exit_code == 1

    def test_day_malformed_entries(self, tmp_path, profile_file):
        bad_json = tmp_path / "bad.json"
        bad_json.write_text("[{bad")
        not_mappings = tmp_path / "oats.yaml"
        not_mappings.write_text("- oats\n")
        for path in (bad_json, not_mappings):
            result = runner.invoke(
                app,
                ["day", str(path), "--profile", str(profile_file),
                 "--date", "2026-10-19", "--json"],
            )
            assert result.exit_code == 1
            response = json.loads(result.stdout)
            assert response["success"] is False
            assert response["command"] == "day"


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_init_and_show(self, isolated_config):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert isolated_config.exists()

        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["nutrition"]["protein_grams_per_kg"] == 1.8

    def test_config_init_refuses_overwrite(self, isolated_config):
        assert runner.invoke(app, ["config", "init"]).exit_code == 0
        assert runner.invoke(app, ["config", "init"]).exit_code == 1
        assert runner.invoke(app, ["config", "init", "--force"]).exit_code == 0

    def test_config_show_rejects_unusable_value(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("nutrition:\n  fat_percentages:\n    gain_weight: 2\n")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False
