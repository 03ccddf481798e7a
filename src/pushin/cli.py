"""CLI entry point for pushin."""

import click

from . import __version__
from .commands import rewards, session, simulate
from .commands.base import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="pushin")
@click.option("--verbose", "-v", count=True, help="Log transitions (-vv for debug)")
def main(verbose: int):
    """pushin: earn screen time with workouts.

    Blocked apps unlock for a while after you complete a workout, then
    lock again once the unlock window and grace period run out.

    Example usage:

        # Replay a 10 minute unlock on synthetic time
        pushin simulate --grace 30

        # Drive an interactive session with the real clock
        pushin session

        # How many squats for 15 minutes?
        pushin rewards target squats 15
    """
    configure_logging(verbose)


main.add_command(simulate)
main.add_command(session)
main.add_command(rewards)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
