from rich.pretty import pprint

from foxcli import *


class Deploy:
    def __init__(self):
        self.target = "local"
        self.force = False
        self.environment = None

    def __call__(self):
        pprint(vars(self))


grammar = (
    program("deployer")
        .shell()
        .colorful()
        .option("verbose", "v", type=bool).build()
        .subcommand("deploy")
            .description("deploy the application")
            .provider(Deploy, invocable=True)
            .option("target", "t").variable("DEPLOY_TARGET").field("target").build()
            .option("force", "f", type=bool).field("force").build()
            .argument("environment").required().field("environment").build()
        .build()
    .build()
)


if __name__ == '__main__':
    pprint(grammar)
    invocation = grammar.parse()
    if invocation.runnable:
        invocation.handler()
