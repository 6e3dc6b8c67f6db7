description = "Show the current branch and the last commits"
category = "git"
tags = ["git"]


async def run(ctx):
    count = int(ctx.args[0]) if ctx.args else 5

    branch = await ctx.shell("git rev-parse --abbrev-ref HEAD")
    if not branch.ok:
        ctx.output.error(branch.stderr or "Not a git repository")
        return

    ctx.output.section(f"Branch: {branch.stdout}")
    log = await ctx.shell("git log --oneline -n {}", count)
    ctx.output.list(log.stdout.splitlines())
