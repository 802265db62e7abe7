import sys

import click

from disclist.cli import cli
from disclist.common import DisclistExpectedError


def main() -> None:
    try:
        cli()
    except DisclistExpectedError as e:
        click.secho(f"{e.__class__.__module__}.{e.__class__.__name__}: ", fg="red", nl=False)
        click.secho(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
