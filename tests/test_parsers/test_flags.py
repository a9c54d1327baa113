import pytest

from flagtree import App, Flag

UNSET = object()


async def parse_flag(flag: Flag, argv: list[str], env: dict | None = None):
    app = App("testapp", "apphelp", flags=[flag])
    return await app.parse(["/bin/cmd", *argv], env or {})


def boolean_flag():
    return Flag.boolean("val", "flaghelp", "v")


def boolean_flag_with_env():
    return Flag.boolean("val", "flaghelp", "v", default_value="true", env_var="VAL")


def string_flag():
    return Flag.string("val", "flaghelp", "v")


def string_flag_with_env():
    return Flag.string("val", "flaghelp", "v", default_value="yay", env_var="VAL")


def repeated_allowed_flag():
    return Flag.string(
        "val", "flaghelp", "v", env_var="VAL", allowed_values=["abc", "xyz"], repeated=True
    )


def int_flag():
    return Flag.integer("val", "flaghelp", "v")


def number_flag():
    return Flag.number("val", "flaghelp", "v")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "make_flag, argv, env, expected",
    [
        (boolean_flag, ["-v"], None, True),
        (boolean_flag, ["-vtrue"], None, True),
        (boolean_flag, ["--val"], None, True),
        (boolean_flag, ["--val=true"], None, True),
        (boolean_flag, [], None, False),
        (boolean_flag, ["-vfalse"], None, False),
        (boolean_flag, ["--no-val"], None, False),
        (boolean_flag, ["--val=false"], None, False),
        (boolean_flag_with_env, [], None, True),
        (boolean_flag_with_env, ["-v"], None, True),
        (boolean_flag_with_env, ["-vfalse"], None, False),
        (boolean_flag_with_env, ["--val=false"], None, False),
        (boolean_flag_with_env, ["--no-val"], None, False),
        (boolean_flag_with_env, [], {"VAL": "false"}, False),
        (boolean_flag_with_env, ["-v"], {"VAL": "false"}, True),
        (string_flag, ["-v", "a"], None, "a"),
        (string_flag, ["-vabc"], None, "abc"),
        (string_flag, ["--val", "b"], None, "b"),
        (string_flag, ["--val=c"], None, "c"),
        (string_flag, ["--val="], None, ""),
        (string_flag, ["--val=a=b"], None, "a=b"),
        (string_flag, ["--val", "--"], None, "--"),
        (string_flag, ["-v", "-f"], None, "-f"),
        (string_flag, ["--val", "--f"], None, "--f"),
        (string_flag, [], None, None),
        (string_flag_with_env, [], None, "yay"),
        (string_flag_with_env, ["-vabc"], None, "abc"),
        (string_flag_with_env, ["--val=xyz"], None, "xyz"),
        (string_flag_with_env, ["--val", "boo"], None, "boo"),
        (string_flag_with_env, [], {"VAL": "lalal"}, "lalal"),
        (string_flag_with_env, ["-vx"], {"VAL": "lalal"}, "x"),
        (repeated_allowed_flag, ["-v", "abc", "-v", "xyz"], None, ["abc", "xyz"]),
        (repeated_allowed_flag, [], {"VAL": "xyz"}, ["xyz"]),
        (int_flag, ["-v", "1"], None, 1),
        (int_flag, ["-v123"], None, 123),
        (int_flag, ["--val", "2"], None, 2),
        (int_flag, ["--val=3"], None, 3),
        (int_flag, ["--val="], None, 0),
        (int_flag, ["-v", "-3"], None, -3),
        (int_flag, ["-v", "-1.2e5"], None, -120000),
        (int_flag, [], None, None),
        (number_flag, ["-v", "1"], None, 1),
        (number_flag, ["-v123"], None, 123),
        (number_flag, ["--val="], None, 0),
        (number_flag, ["-v", "1.2"], None, 1.2),
        (number_flag, ["-v123.5"], None, 123.5),
        (number_flag, ["--val=3.3"], None, 3.3),
        (number_flag, ["-v", "-3.2"], None, -3.2),
        (number_flag, ["-v", "-1.2e5"], None, -120000),
        (number_flag, ["-v", "-1.23456e3"], None, -1234.56),
        (number_flag, ["--val=0x10"], None, 16),
    ],
)
async def test_flag_parses(make_flag, argv, env, expected):
    results = await parse_flag(make_flag(), argv, env)
    assert results.errors == []
    assert results.flags["val"] == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "value, expected",
    [
        ("1", True),
        ("0", False),
        ("true", True),
        ("false", False),
        ("TrUe", True),
        ("fAlSe", False),
        ("T", True),
        ("F", False),
        ("yes", True),
        ("no", False),
        ("Y", True),
        ("N", False),
        ("YES", True),
        ("NO", False),
    ],
)
async def test_boolean_env_spellings(value, expected):
    results = await parse_flag(boolean_flag_with_env(), [], {"VAL": value})
    assert results.errors == []
    assert results.flags["val"] is expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "make_flag, argv, expected",
    [
        (boolean_flag, ["--", "-v"], False),
        (boolean_flag, ["--", "--val"], False),
        (boolean_flag, ["--", "--val=true"], False),
        (boolean_flag, ["--val", "false"], True),
        (string_flag, ["-v"], None),
        (string_flag, ["--val"], None),
        (string_flag, ["--", "-v", "a"], None),
        (string_flag, ["--", "-vabc"], None),
        (string_flag, ["--", "--val", "a"], None),
        (string_flag, ["--", "--val=c"], None),
        (repeated_allowed_flag, ["-v", "not-allowed", "-v", "abc"], ["abc"]),
        (repeated_allowed_flag, ["-v", "abc", "-v", "not-allowed"], ["abc"]),
        (int_flag, ["-v"], None),
        (int_flag, ["--val"], None),
        (int_flag, ["-v", "x"], None),
        (int_flag, ["-v", "1x"], None),
        (int_flag, ["-v", "x1"], None),
        (int_flag, ["-v", "1.2"], None),
        (int_flag, ["-v", "-3.5"], None),
        (int_flag, ["-v", "-3.5123e3"], None),
        (int_flag, ["--", "-v", "1"], None),
        (int_flag, ["--", "--val=4"], None),
        (number_flag, ["-v"], None),
        (number_flag, ["-v", "x"], None),
        (number_flag, ["-v", "1x"], None),
        (number_flag, ["--", "-v2"], None),
        (number_flag, ["--val=infinity"], None),
    ],
)
async def test_flag_errors(make_flag, argv, expected):
    results = await parse_flag(make_flag(), argv)
    assert results.errors != []
    assert results.flags["val"] == expected


@pytest.mark.asyncio
async def test_repeated_flag_with_disallowed_defaults():
    flag = Flag.string(
        "val",
        "flaghelp",
        "v",
        env_var="VAL",
        allowed_values=["abc", "xyz"],
        default_value=["x", "y"],
        repeated=True,
    )
    results = await parse_flag(flag, [])
    assert results.flags["val"] is None
    assert results.errors == [
        'Flag "val" value of x,y is not one of the allowed values: "abc", "xyz"'
    ]


@pytest.mark.asyncio
async def test_missing_value_message():
    results = await parse_flag(int_flag(), ["--val"])
    assert results.errors == ['Missing value for "--val" (expected int)']


@pytest.mark.asyncio
async def test_unknown_flag_message():
    results = await parse_flag(int_flag(), ["--nope"])
    assert results.errors == ['No flag for "--nope" in "testapp"']


@pytest.mark.asyncio
async def test_duplicate_flag_keeps_first_value():
    results = await parse_flag(string_flag(), ["-v", "a", "--val", "b"])
    assert results.flags["val"] == "a"
    assert results.errors == [
        'Flag "val" is specified more than once but is not a repeatable flag.'
    ]


@pytest.mark.asyncio
async def test_disallowed_flag_value_message():
    flag = Flag.string("color", allowed_values=["red", "blue"])
    results = await parse_flag(flag, ["--color", "green"])
    assert results.flags["color"] is None
    assert results.errors == ['Flag "color" is "green" but must be one of "red", "blue"']


@pytest.mark.asyncio
async def test_coercion_failure_message():
    results = await parse_flag(int_flag(), ["-v", "x"])
    assert results.errors == ['Flag --val (parsing "x"): cannot parse "x" as a number.']


@pytest.mark.asyncio
async def test_required_flag_message():
    results = await parse_flag(Flag.integer("num", required=True), [])
    assert results.flags["num"] is None
    assert results.errors == ["Flag --num is required but not provided"]


@pytest.mark.asyncio
async def test_required_flag_satisfied_by_default():
    results = await parse_flag(
        Flag.integer("num", required=True, default_value="5"), []
    )
    assert results.errors == []
    assert results.flags["num"] == 5


@pytest.mark.asyncio
async def test_negated_flag_with_value_is_ignored():
    results = await parse_flag(boolean_flag(), ["--no-val=true"])
    assert results.flags["val"] is False
    assert results.errors == [
        'Ignored flag value provided for negated boolean flag val in "--no-val=true"'
    ]


@pytest.mark.asyncio
async def test_no_prefix_on_non_boolean_flag_is_a_plain_name():
    app = App("testapp", flags=[Flag.string("val"), Flag.string("no-cache")])
    results = await app.parse(["cmd", "--no-val", "--no-cache", "x"], {})
    assert results.errors == ['No flag for "--no-val" in "testapp"']
    assert results.flags["no_cache"] == "x"


@pytest.mark.asyncio
async def test_custom_var_name():
    app = App("testapp", flags=[Flag.boolean("opt", var_name="opt_var")])
    results = await app.parse(["cmd", "--opt"], {})
    assert results.flags == {"opt_var": True}


@pytest.mark.asyncio
async def test_repeated_flag_with_scalar_default_is_a_list():
    flag = Flag.string("tag", "flaghelp", "t", default_value="x", repeated=True)
    results = await parse_flag(flag, [])
    assert results.errors == []
    assert results.flags["tag"] == ["x"]

    results = await parse_flag(flag, ["-t", "y", "--tag=z"])
    assert results.flags["tag"] == ["y", "z"]
