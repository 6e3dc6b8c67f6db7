from pydantic import BaseModel

from actionhost import PluginMeta, define_plugin


class HelloConfig(BaseModel):
    greeting: str = "Hello"
    repeat: int = 1


plugin = define_plugin(
    meta=PluginMeta(name="actionhost-plugin-hello", description="Greets the user"),
    actions=["actions/hello.py"],
    locales="locales",
    config_schema=HelloConfig,
)
