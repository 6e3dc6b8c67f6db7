from actionhost import define_action


async def run(ctx):
    config = ctx.plugin_config or {}
    name = ctx.args[0] if ctx.args else await ctx.prompt.text(ctx.t("plugin:ask_name"))
    for _ in range(config.get("repeat", 1)):
        ctx.output.success(ctx.t("plugin:greeting", greeting=config.get("greeting", "Hello"), name=name))


action = define_action(
    description=lambda ctx: ctx.t("plugin:description"),
    run=run,
    category="demo",
    tags=["example"],
)
