import logging
import sys

from rich.logging import RichHandler
from rich.pretty import pprint

from argdispatch import *

logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)])

settings = {"verbose": False, "output": "-", "color": "auto", "inputs": []}

dispatcher = Dispatcher.from_argv(sys.argv, shell=True, fancy=True)
dispatcher.register_option({"-v", "--verbose"}, Arity.NONE, lambda _: settings.update(verbose=True)) \
          .register_option({"-o", "--output"}, Arity.REQUIRED, lambda value: settings.update(output=value)) \
          .register_option({"--color"}, Arity.OPTIONAL, lambda value: settings.update(color=value or "always"))


@dispatcher.register_positional
def source(value):
    settings["inputs"].append(value)


@dispatcher.register_positional
def target(value):
    settings["inputs"].append(value)


if __name__ == '__main__':
    pprint(dispatcher)
    dispatcher.run()
    pprint(settings)
