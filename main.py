from rich import print
from rich.pretty import pprint

from commandeer import *

canon = Canon()


@canon.command("echo", params=[Parameter("message", "text", "The text to repeat")])
def echo(env, args):
    """Repeat the given text."""
    return args["message"]


@canon.command(
    "set tabsize",
    params=[
        Parameter("size", NumberType(min=1, max=16), "Width of a tab in columns"),
        Parameter("global", "boolean", "Apply to every buffer"),
    ],
)
def set_tabsize(env, args):
    """Change the tab width."""
    env["tabsize"] = args["size"]
    env["tabsize-global"] = args["global"]


if __name__ == '__main__':
    requisition = Requisition(canon, env={})
    for typed in ("", "se", "set tab", "set tabsize 4 --global", "set tabsize 40", "echo 'hello world' again"):
        requisition.update(typed)
        print(requisition)
        pprint(requisition)
        if requisition.status == Status.VALID and requisition.command and requisition.command.executable:
            requisition.exec()
    pprint(requisition.env)
