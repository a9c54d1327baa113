def greet(args, flags):
    greeting = f"Hello, {args['who']}!"
    if flags["verbose"]:
        greeting += " Nice to meet you."
    print(greeting)


async def add(args, flags):
    print(sum(args["numbers"] or []))
