import pytest

from flagtree import App, Arg, Command, Flag
from flagtree.exceptions import CommandAlreadyExistsError, SchemaError


def test_full_name_and_lineage():
    root = Command("myapp")
    core = root.add_command("core")
    imp = core.add_command("import")
    assert imp.full_name == "myapp core import"
    assert [command.name for command in imp.lineage()] == ["myapp", "core", "import"]


def test_duplicate_subcommand():
    root = Command("myapp")
    root.add_command("core")
    with pytest.raises(CommandAlreadyExistsError) as excinfo:
        root.add_command("core")
    assert str(excinfo.value) == '"myapp" has subcommand core registered twice'


def test_repeated_arg_must_be_last():
    with pytest.raises(SchemaError):
        Command("myapp", args=[Arg.string("files", repeated=True), Arg.string("dest")])
    Command("myapp", args=[Arg.string("dest"), Arg.string("files", repeated=True)])


def test_arg_var_names_unique():
    with pytest.raises(SchemaError):
        Command("myapp", args=[Arg.string("a"), Arg.string("b", var_name="a")])


def test_flag_var_names_unique_with_ancestors():
    root = Command("myapp", flags=[Flag.string("name")])
    with pytest.raises(SchemaError):
        root.add_command("sub", flags=[Flag.string("other", var_name="name")])


def test_default_flags_conflict_with_user_help_flag():
    app = App("myapp", flags=[Flag.boolean("help")])
    with pytest.raises(SchemaError):
        app.with_default_flags()


def test_default_flags_conflict_checked_in_subcommands():
    app = App("myapp")
    app.command("sub", flags=[Flag.boolean("show", var_name="show_bash_completions")])
    with pytest.raises(SchemaError):
        app.with_default_flags()


def test_action_must_be_callable():
    with pytest.raises(SchemaError):
        Command("myapp", action="not callable")


def test_lookups_prefer_nearest_command():
    root = Command("myapp", flags=[Flag.string("name", char="n")])
    sub = root.add_command("sub", flags=[Flag.string("name-override", char="o")])
    assert sub.lookup_flag_by_name("name") is root.flags[0]
    assert sub.lookup_flag_by_char("o") is sub.flags[0]
    assert sub.lookup_flag_by_var_name("name_override") is sub.flags[0]
    assert root.lookup_flag_by_char("o") is None


def test_all_flags_order():
    root = Command("myapp", flags=[Flag.string("a")])
    mid = root.add_command("mid", flags=[Flag.string("b")])
    leaf = mid.add_command("leaf", flags=[Flag.string("c")])
    assert [flag.name for flag in leaf.all_flags()] == ["c", "a", "b"]
    assert [flag.name for flag in leaf.inherited_flags()] == ["a", "b"]


def test_short_usage():
    root = Command("myapp", args=[Arg.string("state", required=True), Arg.string("target")])
    assert root.short_usage == "myapp <state> [target]"
