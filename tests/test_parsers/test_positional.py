import pytest

from flagtree import App, Arg


async def parse_args(args: list[Arg], argv: list[str], env: dict | None = None):
    app = App("testapp", "apphelp", args=args)
    return await app.parse(["/bin/cmd", *argv], env or {})


@pytest.mark.asyncio
async def test_positionals_fill_slots_in_order():
    results = await parse_args(
        [Arg.string("first"), Arg.integer("second"), Arg.boolean("third")],
        ["a", "2", "yes"],
    )
    assert results.errors == []
    assert results.args == {"first": "a", "second": 2, "third": True}


@pytest.mark.asyncio
async def test_unfilled_positionals_are_none():
    results = await parse_args([Arg.string("first"), Arg.string("second")], ["a"])
    assert results.errors == []
    assert results.args == {"first": "a", "second": None}


@pytest.mark.asyncio
async def test_required_positional_missing():
    results = await parse_args([Arg.string("target", required=True)], [])
    assert results.args["target"] is None
    assert results.errors == ["Arg 'target' is required but not provided"]


@pytest.mark.asyncio
async def test_repeated_last_positional_collects_the_rest():
    results = await parse_args(
        [Arg.string("cmd"), Arg.path("files", repeated=True)],
        ["cp", "a.txt", "b.txt", "c.txt"],
    )
    assert results.errors == []
    assert results.args == {"cmd": "cp", "files": ["a.txt", "b.txt", "c.txt"]}


@pytest.mark.asyncio
async def test_repeated_positional_reports_first_bad_element():
    results = await parse_args([Arg.integer("nums", repeated=True)], ["1", "x", "y"])
    assert results.args["nums"] is None
    assert results.errors == [
        "Arg 'nums' (parsing \"1,x,y\"): cannot parse \"x\" as a number."
    ]


@pytest.mark.asyncio
async def test_disallowed_positional_is_kept_with_error():
    results = await parse_args([Arg.string("state", allowed_values=["x", "y"])], ["foo"])
    assert results.args["state"] == "foo"
    assert results.errors == ['Arg "state" is "foo" but must be one of "x", "y"']


@pytest.mark.asyncio
async def test_extra_positional():
    results = await parse_args([Arg.string("only")], ["a", "b"])
    assert results.args["only"] == "a"
    assert results.errors == ['Unexpected (extra) positional argument "b".']


@pytest.mark.asyncio
async def test_positional_without_any_slot():
    results = await parse_args([], ["stray"])
    assert results.errors == ['No such subcommand or positional argument for "stray".']


@pytest.mark.asyncio
async def test_double_dash_makes_flag_like_tokens_positional():
    results = await parse_args([Arg.string("first"), Arg.string("second")], ["--", "-x", "--y"])
    assert results.errors == []
    assert results.args == {"first": "-x", "second": "--y"}


@pytest.mark.asyncio
async def test_positional_env_beats_default():
    target = Arg.string("target", env_var="TARGET", default_value="staging")
    results = await parse_args([target], [], {"TARGET": "prod"})
    assert results.args["target"] == "prod"

    results = await parse_args([target], [])
    assert results.args["target"] == "staging"

    results = await parse_args([target], ["dev"], {"TARGET": "prod"})
    assert results.args["target"] == "dev"


@pytest.mark.asyncio
async def test_positional_default_outside_allowed_values():
    results = await parse_args(
        [Arg.string("state", allowed_values=["x", "y"], default_value="z")], []
    )
    assert results.args["state"] is None
    assert results.errors == [
        'Arg "state" value of z is not one of the allowed values: "x", "y"'
    ]


@pytest.mark.asyncio
async def test_repeated_positional_with_scalar_default_is_a_list():
    results = await parse_args([Arg.integer("nums", repeated=True, default_value="3")], [])
    assert results.errors == []
    assert results.args == {"nums": [3]}
