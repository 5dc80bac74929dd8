import os
from pathlib import Path

import pytest

from subprocess_test import PytestLauncher, SetupError, TestIdentity, UnittestLauncher, get_launcher


def sample_function():
    pass


class SampleCase:
    def sample_method(self):
        pass


def test_identity_of_module_function():
    identity = TestIdentity.from_function(sample_function)

    assert identity.module == __name__
    assert identity.qualname == "sample_function"
    assert identity.path == Path(__file__).resolve()
    assert identity.name == "sample_function"
    assert str(identity) == f"{__name__}::sample_function"


def test_identity_of_method():
    identity = TestIdentity.from_function(SampleCase.sample_method)

    assert identity.qualname == "SampleCase.sample_method"
    assert identity.name == "sample_method"


def test_local_functions_are_rejected():
    def local():
        pass

    with pytest.raises(SetupError, match="local scope"):
        TestIdentity.from_function(local)


def test_identity_from_nodeid(tmp_path):
    target = tmp_path / "test_mod.py"

    identity = TestIdentity.from_nodeid(f"{target}::TestA::test_b")

    assert identity.path == target.resolve()
    assert identity.module == "test_mod"
    assert identity.qualname == "TestA.test_b"


def test_nodeid_without_function_is_rejected():
    with pytest.raises(SetupError):
        TestIdentity.from_nodeid("tests/test_mod.py")


def test_pytest_command_selects_exactly_one_test():
    identity = TestIdentity.from_function(SampleCase.sample_method)

    command = PytestLauncher().build_command(identity, "/opt/python")

    assert command[:4] == ["/opt/python", "-u", "-m", "pytest"]
    assert command[4] == f"{Path(__file__).resolve()}::SampleCase::sample_method"
    assert "-s" in command
    assert "-q" in command
    assert "--include-ignored" in command
    assert "no:faulthandler" in command


def test_pytest_selector_needs_a_path():
    identity = TestIdentity(module="mod", qualname="test_x")

    with pytest.raises(SetupError):
        PytestLauncher().selector(identity)


def test_unittest_command():
    identity = TestIdentity(module="pkg.test_mod", qualname="Case.test_a", path=Path("/src/pkg/test_mod.py"))

    command = UnittestLauncher().build_command(identity, "python3")

    assert command == ["python3", "-u", "-m", "unittest", "-q", "pkg.test_mod.Case.test_a"]


def test_unittest_needs_a_test_case_method():
    identity = TestIdentity(module="mod", qualname="test_a", path=Path("/src/mod.py"))

    with pytest.raises(SetupError, match="TestCase method"):
        UnittestLauncher().selector(identity)


def test_unittest_main_module_uses_file_name():
    identity = TestIdentity(module="__main__", qualname="Case.test_a", path=Path("/src/test_script.py"))

    assert UnittestLauncher().selector(identity) == "test_script.Case.test_a"


def test_unittest_import_root_is_prepended(tmp_path):
    path = tmp_path / "pkg" / "sub" / "test_mod.py"
    identity = TestIdentity(module="pkg.sub.test_mod", qualname="Case.test_a", path=path)
    env = {"PYTHONPATH": "existing"}

    UnittestLauncher().prepare_environment(identity, env)

    assert env["PYTHONPATH"] == os.pathsep.join([str(tmp_path), "existing"])


def test_get_launcher():
    assert isinstance(get_launcher("pytest"), PytestLauncher)
    assert isinstance(get_launcher("unittest"), UnittestLauncher)
    with pytest.raises(SetupError, match="Unknown launcher"):
        get_launcher("nose")


def test_parametrized_item_is_selected_by_its_id():
    identity = TestIdentity.from_function(sample_function)
    current = {"PYTEST_CURRENT_TEST": "tests/test_launchers.py::sample_function[beta-2] (call)"}

    narrowed = identity.for_current_item(current)

    assert narrowed.params == "[beta-2]"
    assert PytestLauncher().selector(narrowed) == f"{Path(__file__).resolve()}::sample_function[beta-2]"
    assert str(narrowed) == f"{__name__}::sample_function[beta-2]"


def test_current_item_of_another_test_is_ignored():
    identity = TestIdentity.from_function(SampleCase.sample_method)

    assert identity.for_current_item({}) is identity
    assert identity.for_current_item({"PYTEST_CURRENT_TEST": "t.py::SampleCase::sample_method (call)"}) is identity
    assert identity.for_current_item({"PYTEST_CURRENT_TEST": "t.py::test_other[a] (call)"}) is identity


def test_identity_from_parametrized_nodeid(tmp_path):
    target = tmp_path / "test_mod.py"

    identity = TestIdentity.from_nodeid(f"{target}::TestA::test_b[1.5-x]")

    assert identity.qualname == "TestA.test_b"
    assert identity.params == "[1.5-x]"
    assert PytestLauncher().selector(identity) == f"{target.resolve()}::TestA::test_b[1.5-x]"
