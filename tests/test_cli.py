# -*- coding: utf-8 -*-

import json

import pytest
from click.testing import CliRunner

import fstash
from fstash.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def home(tmpdir):
    return tmpdir.join("home")


@pytest.fixture
def source(tmpdir):
    src = tmpdir.mkdir("source")
    src.join("readme.txt").write_binary(b"hello\n")
    src.join("config.yaml").write_binary(b"port: {{ port }}\n")
    src.join(".git", "HEAD").write_binary(b"ref\n", ensure=True)
    return src


def invoke(runner, home, *args, **kwargs):
    return runner.invoke(main, ["--home", str(home)] + list(args), **kwargs)


def test_cli_create(runner, home, source):
    result = invoke(runner, home, "create", "Demo", str(source))

    assert result.exit_code == 0, result.output
    assert fstash.FStash(str(home)).names() == ["demo"]


def test_cli_create_invalid_name(runner, home, source):
    result = invoke(runner, home, "create", "bad name!", str(source))

    assert result.exit_code == 1
    assert "invalid stash name" in result.output


def test_cli_create_missing_source(runner, home, tmpdir):
    result = invoke(runner, home, "create", "demo", str(tmpdir.join("missing")))

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_cli_expand(runner, home, source, tmpdir):
    dest = tmpdir.join("dest")
    invoke(runner, home, "create", "demo", str(source))

    result = invoke(
        runner, home, "expand", "demo", str(dest), "--data", "config=" + json.dumps({"port": 8080})
    )

    assert result.exit_code == 0, result.output
    assert dest.join("config.yaml").read_binary() == b"port: 8080\n"
    assert dest.join("readme.txt").read_binary() == b"hello\n"
    assert not dest.join(".git").check()


def test_cli_expand_data_file(runner, home, source, tmpdir):
    dest = tmpdir.join("dest")
    data = tmpdir.join("config.json")
    data.write('{"port": 9090}')
    invoke(runner, home, "create", "demo", str(source))

    result = invoke(runner, home, "expand", "demo", str(dest), "--data-file", "config=" + str(data))

    assert result.exit_code == 0, result.output
    assert dest.join("config.yaml").read_binary() == b"port: 9090\n"


def test_cli_expand_bad_data_option(runner, home, source, tmpdir):
    invoke(runner, home, "create", "demo", str(source))

    result = invoke(runner, home, "expand", "demo", str(tmpdir.join("dest")), "--data", "nope")

    assert result.exit_code == 2


def test_cli_expand_strict(runner, home, source, tmpdir):
    invoke(runner, home, "create", "demo", str(source))

    result = invoke(
        runner, home, "expand", "demo", str(tmpdir.join("dest")), "--strict", "--data", "config={}"
    )

    assert result.exit_code == 1
    assert "config.yaml" in result.output


def test_cli_expand_missing(runner, home, tmpdir):
    result = invoke(runner, home, "expand", "ghost", str(tmpdir.join("dest")))

    assert result.exit_code == 1
    assert "stash does not exist: ghost" in result.output


def test_cli_delete(runner, home, source):
    invoke(runner, home, "create", "demo", str(source))

    result = invoke(runner, home, "delete", "demo")

    assert result.exit_code == 0, result.output
    assert fstash.FStash(str(home)).names() == []

    result = invoke(runner, home, "delete", "demo")

    assert result.exit_code == 0, result.output


def test_cli_list(runner, home, source):
    invoke(runner, home, "create", "beta", str(source))
    invoke(runner, home, "create", "alpha", str(source))

    result = invoke(runner, home, "list")

    assert result.exit_code == 0, result.output
    assert sorted(result.output.split()) == ["alpha", "beta"]

    result = invoke(runner, home, "list", "--depth", "0")

    assert result.output == ""


def test_cli_home_envvar(runner, home, source):
    result = runner.invoke(
        main, ["create", "demo", str(source)], env={"FSTASH_HOME": str(home)}
    )

    assert result.exit_code == 0, result.output
    assert home.check(dir=1)
    assert fstash.list_stashes(str(home)) == ["demo"]


@pytest.mark.parametrize("command", ["create", "expand", "delete"])
def test_cli_invalid_name_leaves_home_alone(runner, home, source, tmpdir, command):
    args = {
        "create": ["create", "bad name!", str(source)],
        "expand": ["expand", "bad name!", str(tmpdir.join("dest"))],
        "delete": ["delete", "bad name!"],
    }[command]

    result = invoke(runner, home, *args)

    assert result.exit_code == 1
    assert "invalid stash name" in result.output
    assert not home.check()


def test_cli_unusable_home(runner, tmpdir):
    blocker = tmpdir.join("blocker")
    blocker.write("not a directory")

    result = invoke(runner, blocker.join("home"), "list")

    assert result.exit_code == 1
    assert "Error" in result.output
