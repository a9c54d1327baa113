import asyncio

from flagtree import App, Arg, Flag


async def push(args, flags):
    for target in args["targets"]:
        verb = "Would push" if flags["dry_run"] else "Pushing"
        print(f"{verb} build {flags['build']} to {target}")


async def rollback(args, flags):
    print(f"Rolling back {args['target']} by {args['steps']} step(s)")


app = App(
    "deploy",
    "Ship builds to environments.",
    flags=[
        Flag.boolean("dry-run", "Print instead of doing", "n"),
        Flag.string("build", "Build id", "b", env_var="DEPLOY_BUILD", default_value="latest"),
    ],
).with_default_flags()

app.command(
    "push",
    "Push a build",
    args=[
        Arg.string(
            "targets",
            "Environments",
            repeated=True,
            required=True,
            allowed_values=["dev", "staging", "prod"],
        )
    ],
    action=push,
)
app.command(
    "rollback",
    "Roll back a target",
    args=[
        Arg.string("target", "Environment", required=True, allowed_values=["staging", "prod"]),
        Arg.integer("steps", "How far back", default_value="1"),
    ],
    action=rollback,
)


async def main() -> None:
    results = await app.parse()
    await results.run()


if __name__ == "__main__":
    asyncio.run(main())
