import json

from click.testing import CliRunner

from cgp_evolution.cli import cli


def test_reverse_command():
    runner = CliRunner()
    result = runner.invoke(cli, ['reverse', '--seed', '1'])
    assert result.exit_code == 0, result.output
    assert "Output for [1, 2, 3]: [3.0, 2.0, 1.0]" in result.output


def test_regress_command_prints_json():
    runner = CliRunner()
    result = runner.invoke(cli, ['regress', '--generations', '5', '--seed', '3', '--json'])
    assert result.exit_code == 0, result.output
    assert "Evolution finished after 5 generations" in result.output

    payload = result.output[result.output.index('{'):]
    data = json.loads(payload)
    assert len(data['outputs']) == 1
    assert len(data['nodes']) == 30


def test_invalid_options_are_reported():
    runner = CliRunner()
    result = runner.invoke(cli, ['regress', '--population', '1'])
    assert result.exit_code != 0
    assert "population_size must be at least 2" in result.output
